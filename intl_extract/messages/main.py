"""
MainMessage — The top-level record produced for each extracted call.

Both Intl.message(...) and a direct Intl.plural/gender/select(...) call
become a MainMessage; for the direct form the select-family message is
the single piece of the main message.
"""

import json
from typing import Any, Dict, List, Optional

from ..core.nodes import NodeKind, Parameter, SyntaxNode
from .base import (
    Message,
    MessageExtractionError,
    MessagePiece,
    STRING_KINDS,
    escape_string,
    pieces_to_code,
    pieces_to_icu,
)
from .sub import SubMessage


class MainMessage(Message):
    """
    A named, translatable message.

    Attributes:
        pieces: Decomposed body (str / argument index / SubMessage)
        description: desc: attribute
        meaning: meaning: attribute, disambiguates equal texts
        locale: locale: attribute
        examples: examples: attribute, argument name -> example value
        skip: skip: attribute; skipped messages are not collected
        source_position: Start offset of the call in its unit
        end_position: End offset of the call in its unit
        source_text: Source of the call, when requested
    """

    # Named arguments Intl.message accepts as attributes
    attribute_names = ("name", "desc", "examples", "args", "meaning", "locale", "skip")

    def __init__(self):
        super().__init__(None)
        self.pieces: List[MessagePiece] = []
        self._name: Optional[str] = None
        self._arguments: List[str] = []
        self.description: Optional[Any] = None
        self.meaning: Optional[Any] = None
        self.locale: Optional[Any] = None
        self.examples: Dict[str, Any] = {}
        self.skip: bool = False
        self.source_position: Optional[int] = None
        self.end_position: Optional[int] = None
        self.source_text: Optional[str] = None

    def __repr__(self) -> str:
        return f"MainMessage(name={self._name!r}, pieces={self.pieces!r})"

    @property
    def name(self) -> Optional[str]:
        return self._name

    @name.setter
    def name(self, value: Optional[str]) -> None:
        self._name = value

    @property
    def has_name(self) -> bool:
        return bool(self._name)

    @property
    def arguments(self) -> List[str]:
        return self._arguments

    @arguments.setter
    def arguments(self, value: List[str]) -> None:
        self._arguments = list(value)

    def __setitem__(self, attribute: str, value: Any) -> None:
        if attribute == "desc":
            self.description = value
        elif attribute == "examples":
            self.examples = value if isinstance(value, dict) else {}
        elif attribute == "name":
            self._name = value if isinstance(value, str) else str(value)
        elif attribute == "meaning":
            self.meaning = value
        elif attribute == "locale":
            self.locale = value
        elif attribute == "skip":
            self.skip = value is True
        # "args" is ignored: the declaration's parameters are authoritative

    def add_pieces(self, pieces: List[MessagePiece]) -> None:
        for piece in pieces:
            if isinstance(piece, SubMessage):
                piece.parent = self
            self.pieces.append(piece)

    def check_validity(
        self,
        node: SyntaxNode,
        arguments: List[SyntaxNode],
        outer_name: Optional[str],
        outer_parameters: List[Parameter],
        class_name: Optional[str] = None,
        name_and_args_generated: bool = False,
        examples_required: bool = False,
    ) -> Optional[str]:
        positional = [arg for arg in arguments if arg.kind != NodeKind.NAMED_ARGUMENT]
        if not positional or positional[0].kind not in STRING_KINDS:
            return "Intl.message messages must be string literals"
        return super().check_validity(
            node, arguments, outer_name, outer_parameters,
            class_name=class_name,
            name_and_args_generated=name_and_args_generated,
            examples_required=examples_required,
        )

    def validate(self) -> None:
        """
        Check the assembled message.

        Raises:
            MessageExtractionError: If the message is missing a name, or
                refers to arguments it does not have
        """
        if not self.has_name:
            raise MessageExtractionError("The message has no name")
        errors = _piece_errors(self.pieces, len(self._arguments), self._name)
        if errors:
            raise MessageExtractionError(errors)

    def validate_description(self) -> None:
        if self.description is None or self.description == "":
            raise MessageExtractionError(f"Missing description for message {self._name}")

    def to_original_code(self, include_desc: bool = True, include_examples: bool = True) -> str:
        """Regenerate the message as a canonical Intl.message call."""
        out = ["Intl.message('", pieces_to_code(self.pieces, self._arguments), "', "]
        out.append(f"name: '{self._name}', ")
        if self.locale is not None:
            out.append(f"locale: '{self.locale}', ")
        if include_desc and self.description is not None:
            out.append(f"desc: '{escape_string(str(self.description))}', ")
        if include_examples:
            out.append(f"examples: const {json.dumps(self.examples, default=str)}, ")
        if self.meaning is not None:
            out.append(f"meaning: '{escape_string(str(self.meaning))}', ")
        out.append(f"args: [{', '.join(self._arguments)}]")
        out.append(")")
        return "".join(out)

    def expanded(self) -> str:
        """The message text in ICU MessageFormat syntax."""
        return pieces_to_icu(self.pieces, self._arguments)

    def to_json(self) -> Dict[str, Any]:
        """Serializable form for catalog tooling."""
        data: Dict[str, Any] = {
            "name": self._name,
            "text": self.expanded(),
            "arguments": list(self._arguments),
        }
        if self.description is not None:
            data["description"] = self.description
        if self.meaning is not None:
            data["meaning"] = self.meaning
        if self.locale is not None:
            data["locale"] = self.locale
        if self.examples:
            data["examples"] = self.examples
        if self.source_text is not None:
            data["source_text"] = self.source_text
        return data


def _piece_errors(pieces: List[MessagePiece], argument_count: int, name: Optional[str]) -> List[str]:
    errors: List[str] = []
    for piece in pieces:
        if isinstance(piece, SubMessage):
            errors.extend(piece.validate(argument_count))
            for case_pieces in piece.cases.values():
                errors.extend(_piece_errors(case_pieces, argument_count, name))
        elif isinstance(piece, int) and not 0 <= piece < argument_count:
            errors.append(f"Argument index {piece} is out of range in message '{name}'")
    return errors
