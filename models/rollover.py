from dataclasses import dataclass, field


@dataclass
class RolloverResult:
    rolled_over: bool
    moved_count: int
    month: str              # 'YYYY-MM' the owner is now current for
    failed_ids: list[int] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.failed_ids
