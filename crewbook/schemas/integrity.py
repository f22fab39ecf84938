from dataclasses import dataclass, field


@dataclass
class IntegrityReport:
    issues: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.issues) == 0


@dataclass
class CleanupReport:
    issues: list[str] = field(default_factory=list)
    removed: dict[str, int] = field(default_factory=dict)   # store key -> records dropped

    @property
    def cleaned(self) -> bool:
        return bool(self.issues)
