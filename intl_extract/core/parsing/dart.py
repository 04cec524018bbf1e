"""
Dart tree builder — Folds the tree-sitter Dart CST into SyntaxNodes.

The tree-sitter Dart grammar is flatter than the extractor needs:
- a top-level function is a ``function_signature`` followed by a sibling
  ``function_body``; class methods pair ``method_signature`` with
  ``function_body`` the same way
- a call such as ``Intl.message('x')`` is an ``identifier`` followed by
  ``selector`` siblings (``.message`` then the argument part)

DartTreeBuilder re-pairs those siblings into declaration, CALL and
PREFIXED_IDENTIFIER nodes. Node types it does not know become OTHER
nodes whose children are still converted, so message calls nested
anywhere stay reachable.
"""

from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from ..nodes import LineInfo, NodeKind, Parameter, SyntaxNode, call_children
from .strings import decode_string_literal

if TYPE_CHECKING:
    from tree_sitter import Node


# Where a node sits decides how declarations inside it are read
_UNIT = "unit"
_CLASS = "class"
_BODY = "body"

_SIGNATURE_TYPES = frozenset({
    'function_signature',
    'method_signature',
    'getter_signature',
    'setter_signature',
})

_DECLARATION_WRAPPERS = frozenset({
    'function_declaration',
    'method_declaration',
    'lambda_expression',
})

_VARIABLE_LIST_TYPES = frozenset({
    'static_final_declaration_list',
    'initialized_identifier_list',
})

_CLASS_LIKE_TYPES = frozenset({
    'class_definition',
    'mixin_declaration',
    'extension_declaration',
    'enum_declaration',
})

_SELECTOR_TYPES = frozenset({
    'selector',
    'argument_part',
    'arguments',
    'assignable_selector',
    'unconditional_assignable_selector',
    'conditional_assignable_selector',
})

_MEMBER_SELECTOR_TYPES = frozenset({
    'unconditional_assignable_selector',
    'conditional_assignable_selector',
})

_IDENTIFIER_TYPES = frozenset({'identifier', 'type_identifier'})

_INTEGER_TYPES = frozenset({'decimal_integer_literal', 'hex_integer_literal'})

_SKIPPED_TYPES = frozenset({'comment', 'documentation_comment', 'metadata', 'annotation'})


class DartTreeBuilder:
    """
    Converts one tree-sitter Dart tree into a SyntaxNode UNIT.

    Usage:
        builder = DartTreeBuilder(source_bytes)
        unit = builder.build(tree.root_node)
    """

    def __init__(self, source: bytes):
        self.source = source
        # Names of the enclosing class-like declarations, innermost last
        self._class_names: List[Optional[str]] = []

    def build(self, root: 'Node') -> SyntaxNode:
        """Convert the root of a parse tree into a UNIT node."""
        return SyntaxNode(
            kind=NodeKind.UNIT,
            text=self._text(root),
            offset=root.start_byte,
            end=root.end_byte,
            children=self._convert_children(root.children, _UNIT),
            line_info=LineInfo(self.source),
        )

    # -------------------------------------------------------------------------
    # Sequences
    # -------------------------------------------------------------------------

    def _convert_children(self, children: List['Node'], scope: str) -> List[SyntaxNode]:
        """
        Convert a run of sibling CST nodes.

        Pairs signatures with their bodies, turns variable lists into
        declarations at unit/class level, and folds ``primary selector*``
        runs into calls and property accesses.
        """
        children = list(children)
        result: List[SyntaxNode] = []
        const_pending = False
        index = 0
        while index < len(children):
            child = children[index]
            if child.type in ('const_builtin', 'const'):
                const_pending = True
                index += 1
                continue
            if not child.is_named or child.type in _SKIPPED_TYPES:
                index += 1
                continue

            if child.type in _SIGNATURE_TYPES:
                body_index = self._next_named_index(children, index)
                if body_index is not None and children[body_index].type == 'function_body':
                    declaration = self._declaration(child, children[body_index], scope)
                    if declaration is not None:
                        result.append(declaration)
                    else:
                        result.extend(self._convert_children(children[body_index].children, _BODY))
                    index = body_index + 1
                    continue

            if child.type in _VARIABLE_LIST_TYPES and scope in (_UNIT, _CLASS):
                result.append(self._variable_declaration(child, scope))
                index += 1
                continue

            node = self._convert(child, scope)
            index += 1
            if node is not None and const_pending and node.kind in (NodeKind.LIST_LITERAL, NodeKind.MAP_LITERAL):
                node.is_const = True
            const_pending = False

            selectors = []
            while index < len(children) and children[index].type in _SELECTOR_TYPES:
                selectors.append(children[index])
                index += 1
            if node is not None and selectors:
                node = self._apply_selectors(node, child.start_byte, selectors)

            if node is not None:
                result.append(node)
        return result

    def _convert_expression(self, children: List['Node'], start: int, end: int) -> Optional[SyntaxNode]:
        """Convert the siblings of one expression into a single node."""
        nodes = self._convert_children(children, _BODY)
        if not nodes:
            return None
        if len(nodes) == 1:
            return nodes[0]
        return self._span(NodeKind.OTHER, start, end, children=nodes)

    @staticmethod
    def _next_named_index(children: List['Node'], index: int) -> Optional[int]:
        for position in range(index + 1, len(children)):
            if children[position].is_named and children[position].type not in _SKIPPED_TYPES:
                return position
        return None

    # -------------------------------------------------------------------------
    # Single nodes
    # -------------------------------------------------------------------------

    def _convert(self, node: 'Node', scope: str) -> Optional[SyntaxNode]:
        """Convert one named CST node (and its subtree)."""
        node_type = node.type

        if node_type in _IDENTIFIER_TYPES:
            return self._span(NodeKind.IDENTIFIER, node.start_byte, node.end_byte, name=self._text(node))
        if node_type == 'string_literal':
            return self._string_literal(node)
        if node_type in _INTEGER_TYPES:
            return self._span(NodeKind.INTEGER_LITERAL, node.start_byte, node.end_byte)
        if node_type == 'decimal_floating_point_literal':
            return self._span(NodeKind.DOUBLE_LITERAL, node.start_byte, node.end_byte)
        if node_type in ('true', 'false', 'boolean_literal'):
            return self._span(NodeKind.BOOLEAN_LITERAL, node.start_byte, node.end_byte)
        if node_type == 'null_literal':
            return self._span(NodeKind.NULL_LITERAL, node.start_byte, node.end_byte)
        if node_type == 'list_literal':
            return self._span(NodeKind.LIST_LITERAL, node.start_byte, node.end_byte,
                              children=self._convert_children(node.children, _BODY),
                              is_const=self._is_const(node))
        if node_type == 'set_or_map_literal':
            return self._set_or_map_literal(node)
        if node_type == 'pair':
            return self._span(NodeKind.MAP_ENTRY, node.start_byte, node.end_byte,
                              children=self._convert_children(node.children, _BODY))
        if node_type == 'argument':
            return self._convert_expression(node.children, node.start_byte, node.end_byte)
        if node_type == 'named_argument':
            return self._named_argument(node)
        if node_type == 'function_expression':
            return self._function_literal(node)
        if node_type in _DECLARATION_WRAPPERS:
            return self._wrapped_declaration(node, scope)
        if node_type in _CLASS_LIKE_TYPES:
            return self._class_like(node)
        if node_type == 'declaration' and scope == _CLASS:
            return self._span(NodeKind.OTHER, node.start_byte, node.end_byte,
                              children=self._convert_children(node.children, _CLASS))

        # Unit-level wrappers keep unit scope so the declarations inside still pair up
        inner_scope = _UNIT if scope == _UNIT else _BODY
        return self._span(NodeKind.OTHER, node.start_byte, node.end_byte,
                          children=self._convert_children(node.children, inner_scope))

    def _string_literal(self, node: 'Node') -> SyntaxNode:
        substitutions: Dict[int, 'Node'] = {}
        stack = list(node.children)
        while stack:
            current = stack.pop()
            if current.type == 'template_substitution':
                substitutions[current.start_byte] = current
            stack.extend(current.children)

        def substitution_at(offset: int) -> Optional[Tuple[SyntaxNode, int]]:
            found = substitutions.get(offset) or substitutions.get(offset + 1)
            if found is None:
                return None
            expression = self._convert_expression(found.children, found.start_byte, found.end_byte)
            if expression is None:
                return None
            return expression, found.end_byte

        return decode_string_literal(self.source, node.start_byte, node.end_byte, substitution_at)

    def _set_or_map_literal(self, node: 'Node') -> SyntaxNode:
        children = self._convert_children(node.children, _BODY)
        is_map = any(child.kind == NodeKind.MAP_ENTRY for child in children)
        kind = NodeKind.MAP_LITERAL if is_map else NodeKind.OTHER
        return self._span(kind, node.start_byte, node.end_byte,
                          children=children, is_const=self._is_const(node))

    def _named_argument(self, node: 'Node') -> SyntaxNode:
        label = None
        value_children = []
        for child in node.children:
            if label is None and child.type == 'label':
                label = self._text(child).rstrip(':').strip()
            else:
                value_children.append(child)

        expression = self._convert_expression(value_children, node.start_byte, node.end_byte)
        if expression is None:
            # Keyword literals may come through as anonymous tokens
            expression = self._literal_from_tokens(value_children)
        return self._span(NodeKind.NAMED_ARGUMENT, node.start_byte, node.end_byte,
                          name=label, children=[expression] if expression else [])

    def _literal_from_tokens(self, tokens: List['Node']) -> Optional[SyntaxNode]:
        for token in tokens:
            text = self._text(token).strip()
            if text in ('true', 'false'):
                return self._span(NodeKind.BOOLEAN_LITERAL, token.start_byte, token.end_byte)
            if text == 'null':
                return self._span(NodeKind.NULL_LITERAL, token.start_byte, token.end_byte)
        return None

    def _function_literal(self, node: 'Node') -> SyntaxNode:
        body = [child for child in node.children if child.type != 'formal_parameter_list']
        return self._span(NodeKind.FUNCTION_LITERAL, node.start_byte, node.end_byte,
                          parameters=self._parameters(node),
                          children=self._convert_children(body, _BODY))

    def _class_like(self, node: 'Node') -> SyntaxNode:
        if node.type == 'class_definition':
            name = self._field_text(node, 'name') or self._first_child_text(node, _IDENTIFIER_TYPES)
        else:
            name = self._field_text(node, 'name')

        children: List[SyntaxNode] = []
        self._class_names.append(name)
        try:
            for child in node.children:
                if child.type.endswith('_body'):
                    children.extend(self._convert_children(child.children, _CLASS))
        finally:
            self._class_names.pop()

        if node.type != 'class_definition':
            name = None

        kind = NodeKind.CLASS_DECLARATION if node.type == 'class_definition' else NodeKind.OTHER
        return self._span(kind, node.start_byte, node.end_byte, name=name, children=children)

    # -------------------------------------------------------------------------
    # Declarations
    # -------------------------------------------------------------------------

    def _declaration(self, signature: 'Node', body: 'Node', scope: str) -> Optional[SyntaxNode]:
        """Build a function or method declaration from a signature/body pair."""
        if signature.type == 'method_signature':
            inner = next((child for child in signature.children
                          if child.type in ('function_signature', 'getter_signature', 'setter_signature')),
                         None)
            if inner is None:
                inner = self._untyped_method_signature(signature, scope)
            if inner is None:
                # Constructors, factories and operators carry no message context
                return None
            signature = inner

        name = self._field_text(signature, 'name') or self._first_child_text(signature, _IDENTIFIER_TYPES)
        if signature.type == 'getter_signature':
            parameters: List[Parameter] = []
        else:
            parameters = self._parameters(signature)

        kind = NodeKind.METHOD_DECLARATION if scope == _CLASS else NodeKind.FUNCTION_DECLARATION
        return self._span(kind, signature.start_byte, body.end_byte,
                          name=name, parameters=parameters,
                          children=self._convert_children(body.children, _BODY))

    def _untyped_method_signature(self, signature: 'Node', scope: str) -> Optional['Node']:
        """
        A method with no return type, which the grammar reads as a constructor.

        ``f(x) => ...`` inside ``class Q`` parses as a ``constructor_signature``.
        It is a real constructor only when its name is the class name
        (``Q(...)``, ``Q.named(...)``).
        """
        if scope != _CLASS or not self._class_names:
            return None
        candidate = next((child for child in signature.children if child.type == 'constructor_signature'), None)
        if candidate is None:
            return None
        names = [self._text(child) for child in candidate.children if child.type in _IDENTIFIER_TYPES]
        if len(names) != 1 or names[0] == self._class_names[-1]:
            return None
        return candidate
        """Declarations whose signature and body share a parent node."""
        signature = next((child for child in node.children if child.type in _SIGNATURE_TYPES), None)
        body = next((child for child in node.children if child.type == 'function_body'), None)
        if signature is not None and body is not None:
            declaration = self._declaration(signature, body, _BODY if scope != _CLASS else _CLASS)
            if declaration is not None:
                declaration.offset = node.start_byte
                declaration.text = self._text(node)
                return declaration
        return self._span(NodeKind.OTHER, node.start_byte, node.end_byte,
                          children=self._convert_children(node.children, _BODY))

    def _variable_declaration(self, node: 'Node', scope: str) -> SyntaxNode:
        """Field or top-level variable declaration from a variable list."""
        variables: List[str] = []
        initializers: List[SyntaxNode] = []

        for item in node.children:
            if not item.is_named:
                continue
            if item.type in _IDENTIFIER_TYPES:
                variables.append(self._text(item))
                continue

            parts = list(item.children)
            equals = next((i for i, part in enumerate(parts) if part.type == '='), None)
            head = parts if equals is None else parts[:equals]
            name = next((self._text(part) for part in head if part.type in _IDENTIFIER_TYPES), None)
            if name is not None:
                variables.append(name)
            if equals is not None:
                initializers.extend(self._convert_children(parts[equals + 1:], _BODY))

        name: Optional[str] = None
        parameters: Optional[List[Parameter]] = None
        if len(variables) == 1:
            name = variables[0]
            parameters = []
            if len(initializers) == 1 and initializers[0].kind == NodeKind.FUNCTION_LITERAL:
                parameters = list(initializers[0].parameters or [])

        kind = NodeKind.FIELD_DECLARATION if scope == _CLASS else NodeKind.TOP_LEVEL_VARIABLE_DECLARATION
        return self._span(kind, node.start_byte, node.end_byte,
                          name=name, parameters=parameters, variables=variables,
                          children=initializers)

    def _parameters(self, node: 'Node') -> List[Parameter]:
        """Formal parameters of a signature or function expression."""
        parameter_list = next((child for child in node.children if child.type == 'formal_parameter_list'), None)
        parameters: List[Parameter] = []
        if parameter_list is not None:
            self._collect_parameters(parameter_list, False, parameters)
        return parameters

    def _collect_parameters(self, node: 'Node', named: bool, out: List[Parameter]) -> None:
        for child in node.children:
            if child.type == 'formal_parameter':
                name = self._parameter_name(child)
                if name:
                    out.append(Parameter(name=name, is_named=named))
            elif child.type == 'optional_formal_parameters':
                opener = child.children[0] if child.children else None
                self._collect_parameters(child, opener is not None and opener.type == '{', out)
            elif child.is_named and child.type != 'formal_parameter_list':
                self._collect_parameters(child, named, out)

    def _parameter_name(self, node: 'Node') -> Optional[str]:
        name = self._field_text(node, 'name')
        if name:
            return name
        identifiers = [child for child in node.children if child.type == 'identifier']
        if identifiers:
            return self._text(identifiers[-1])
        # this.x / super.x and wrapped forms
        for child in node.children:
            if child.is_named:
                nested = self._parameter_name(child)
                if nested:
                    return nested
        return None

    # -------------------------------------------------------------------------
    # Selectors
    # -------------------------------------------------------------------------

    def _apply_selectors(self, node: SyntaxNode, start: int, selectors: List['Node']) -> SyntaxNode:
        """Fold ``.member`` and ``(arguments)`` selectors onto a primary."""
        current = node
        pending: Optional[str] = None
        pending_end = node.end

        for selector in selectors:
            arguments = self._selector_arguments(selector)
            if arguments is not None:
                if pending is not None:
                    current = self._span(NodeKind.CALL, start, selector.end_byte,
                                         name=pending, target=current, arguments=arguments,
                                         children=call_children(current, arguments))
                elif current.kind == NodeKind.IDENTIFIER:
                    current = self._span(NodeKind.CALL, start, selector.end_byte,
                                         name=current.name, arguments=arguments,
                                         children=list(arguments))
                else:
                    current = self._span(NodeKind.CALL, start, selector.end_byte,
                                         target=current, arguments=arguments,
                                         children=call_children(current, arguments))
                pending = None
                continue

            member = self._selector_member(selector)
            if member is not None:
                if pending is not None:
                    current = self._access(current, pending, start, pending_end)
                pending = member
                pending_end = selector.end_byte

        if pending is not None:
            current = self._access(current, pending, start, pending_end)
        return current

    def _access(self, target: SyntaxNode, name: str, start: int, end: int) -> SyntaxNode:
        if target.kind == NodeKind.IDENTIFIER:
            return self._span(NodeKind.PREFIXED_IDENTIFIER, start, end,
                              prefix=target.name, name=name, children=[target])
        return self._span(NodeKind.PROPERTY_ACCESS, start, end,
                          name=name, target=target, children=[target])

    def _selector_arguments(self, selector: 'Node') -> Optional[List[SyntaxNode]]:
        if selector.type == 'arguments':
            return self._convert_children(selector.children, _BODY)
        for child in selector.children:
            if child.type == 'arguments':
                return self._convert_children(child.children, _BODY)
            if child.type == 'argument_part':
                return self._selector_arguments(child)
        return None

    def _selector_member(self, selector: 'Node') -> Optional[str]:
        candidates = [selector]
        for child in selector.children:
            candidates.append(child)
            candidates.extend(child.children)
        for candidate in candidates:
            if candidate.type in _MEMBER_SELECTOR_TYPES:
                return self._first_child_text(candidate, _IDENTIFIER_TYPES)
        return None

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _span(self, kind: NodeKind, start: int, end: int, **kwargs) -> SyntaxNode:
        text = self.source[start:end].decode('utf-8', errors='replace')
        return SyntaxNode(kind=kind, text=text, offset=start, end=end, **kwargs)

    def _text(self, node: 'Node') -> str:
        return self.source[node.start_byte:node.end_byte].decode('utf-8', errors='replace')

    def _field_text(self, node: 'Node', field_name: str) -> Optional[str]:
        """Get text of a named field in the node."""
        child = node.child_by_field_name(field_name)
        if child is not None:
            return self._text(child)
        return None

    def _first_child_text(self, node: 'Node', types) -> Optional[str]:
        """Get text of first child with a matching type."""
        for child in node.children:
            if child.type in types:
                return self._text(child)
        return None

    def _is_const(self, node: 'Node') -> bool:
        return any(child.type in ('const_builtin', 'const') for child in node.children) \
            or self._text(node).lstrip().startswith('const')
