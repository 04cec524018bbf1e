"""
Traversal context — What the extractor knows about the enclosing code.

Only the innermost declaration matters: entering a declaration replaces
the name and parameters, leaving it clears them rather than restoring
an outer declaration's values. The enclosing class is tracked on its
own and survives declarations.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from ..core.nodes import Parameter


@dataclass(frozen=True)
class TraversalContext:
    """
    Immutable snapshot passed down the traversal.

    Attributes:
        name: Name of the enclosing declaration, None if unknown
        parameters: Its formal parameters; None outside any usable
            declaration
        class_name: Name of the enclosing class, if any
    """
    name: Optional[str] = None
    parameters: Optional[Tuple[Parameter, ...]] = None
    class_name: Optional[str] = None

    @property
    def in_declaration(self) -> bool:
        return self.parameters is not None

    @property
    def parameter_names(self) -> List[str]:
        return [parameter.name for parameter in self.parameters or ()]

    @property
    def has_named_parameters(self) -> bool:
        return any(parameter.is_named for parameter in self.parameters or ())

    def entering_declaration(self, name: Optional[str],
                             parameters: Optional[Sequence[Parameter]]) -> 'TraversalContext':
        return replace(self, name=name,
                       parameters=tuple(parameters) if parameters is not None else None)

    def leaving_declaration(self) -> 'TraversalContext':
        return TraversalContext(class_name=self.class_name)

    def entering_class(self, class_name: Optional[str]) -> 'TraversalContext':
        return replace(self, class_name=class_name)

    def leaving_class(self, outer: 'TraversalContext') -> 'TraversalContext':
        return replace(self, class_name=outer.class_name)
