# txtempl/core/variables.py
"""
Variables and the store the renderer resolves placeholders against.

The store is keyed by ``(name, kind)`` so a SETTING may share its name with a
CONSTANT, OPTION or KEY without one shadowing the other.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Mapping, Optional, Tuple


LANGUAGE_SETTING = "lang"


class VariableKind(Enum):
    SETTING = "setting"
    CONSTANT = "constant"
    OPTION = "option"
    KEY = "key"


@dataclass(frozen=True)
class Variable:
    kind: VariableKind
    # for OPTION this is the name of the CONSTANT it points at.
    value: str


class VariableStore:
    """Mapping of ``(name, kind)`` to :class:`Variable`."""

    def __init__(self, entries: Optional[Mapping[Tuple[str, VariableKind], Variable]] = None):
        self._entries: Dict[Tuple[str, VariableKind], Variable] = {}
        if entries:
            for (name, _kind), variable in entries.items():
                self.set(name, variable)

    @classmethod
    def from_mappings(
        cls,
        constants: Optional[Mapping[str, str]] = None,
        options: Optional[Mapping[str, str]] = None,
        keys: Optional[Mapping[str, str]] = None,
        settings: Optional[Mapping[str, str]] = None,
    ) -> "VariableStore":
        store = cls()
        for kind, values in (
            (VariableKind.SETTING, settings),
            (VariableKind.CONSTANT, constants),
            (VariableKind.OPTION, options),
            (VariableKind.KEY, keys),
        ):
            for name, value in (values or {}).items():
                store.set(str(name), Variable(kind, str(value)))
        return store

    def set(self, name: str, variable: Variable) -> None:
        self._entries[(name, variable.kind)] = variable

    def get(self, name: str, kind: VariableKind) -> Optional[Variable]:
        return self._entries.get((name, kind))

    def of_kind(self, kind: VariableKind) -> Dict[str, str]:
        return {name: var.value for (name, k), var in self._entries.items() if k == kind}

    @property
    def settings(self) -> Dict[str, str]:
        return self.of_kind(VariableKind.SETTING)

    @property
    def language(self) -> Optional[str]:
        setting = self.get(LANGUAGE_SETTING, VariableKind.SETTING)
        return setting.value if setting else None

    def copy(self) -> "VariableStore":
        return VariableStore(self._entries)

    def __contains__(self, item: Tuple[str, VariableKind]) -> bool:
        return item in self._entries

    def __iter__(self) -> Iterator[Tuple[str, Variable]]:
        for (name, _kind), variable in self._entries.items():
            yield name, variable

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"VariableStore({len(self)} entries)"
