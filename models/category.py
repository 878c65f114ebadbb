from dataclasses import dataclass


@dataclass
class Category:
    name: str
    kind: str               # 'expense' | 'income' | 'both'
    is_custom: bool = False
    id: int | None = None
