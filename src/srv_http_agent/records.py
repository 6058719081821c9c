"""SRV service record model."""
from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceRecord:
    """One SRV answer: where a service instance lives."""
    target: str
    port: int
    priority: int = 0
    weight: int = 0

    def __post_init__(self):
        if not self.target:
            raise ValueError("SRV target must not be empty")
        for field_name in ('port', 'priority', 'weight'):
            value = getattr(self, field_name)
            if not 0 <= value <= 65535:
                raise ValueError(f"SRV {field_name} out of range: {value}")

    @classmethod
    def from_rr(cls, rr) -> "ServiceRecord":
        """Build a record from a dnslib SRV resource record."""
        srv = rr.rdata
        return cls(
            target=str(srv.target).rstrip('.'),
            port=srv.port,
            priority=srv.priority,
            weight=srv.weight,
        )
