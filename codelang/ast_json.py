"""JSON serialization/deserialization for the CODE AST.

This module converts between statement lists of AST dataclasses and plain
Python dict/list structures suitable for JSON encoding. It supports a full
round-trip for all node types, tokens, type tags and literal values,
including the ``None`` placeholders left by failed statements.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Assign,
    Binary,
    Block,
    Declaration,
    DeclarationGroup,
    Display,
    ExpressionStmt,
    Grouping,
    If,
    Literal,
    Logical,
    NewLine,
    Scan,
    Unary,
    Variable,
    While,
)
from .tokens import Token, TokenKind
from .types import CharVal, TypeTag


def token_to_obj(token: Token) -> Dict[str, Any]:
    return {
        "__type__": "Token",
        "kind": token.kind.name,
        "lexeme": token.lexeme,
        "literal": ast_to_obj(token.literal),
        "line": token.line,
    }


def token_from_obj(o: Dict[str, Any]) -> Token:
    return Token(TokenKind[o["kind"]], o["lexeme"], ast_from_obj(o.get("literal")), o["line"])


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None:
        return None
    if isinstance(node, CharVal):
        return {"__type__": "Char", "value": str(node)}
    if isinstance(node, (int, float, str, bool)):
        return node
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]

    if isinstance(node, Token):
        return token_to_obj(node)
    if isinstance(node, TypeTag):
        return {"__type__": "TypeTag", "value": node.name}

    # Expression nodes
    if isinstance(node, Literal):
        return {"type": "Literal", "value": ast_to_obj(node.value)}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Unary):
        return {"type": "Unary", "operator": ast_to_obj(node.operator), "right": ast_to_obj(node.right)}
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "left": ast_to_obj(node.left),
            "operator": ast_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Logical):
        return {
            "type": "Logical",
            "left": ast_to_obj(node.left),
            "operator": ast_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Variable):
        return {"type": "Variable", "name": ast_to_obj(node.name)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": ast_to_obj(node.name), "value": ast_to_obj(node.value)}

    # Statement nodes
    if isinstance(node, ExpressionStmt):
        return {"type": "ExpressionStmt", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Display):
        return {"type": "Display", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Scan):
        return {"type": "Scan", "name": ast_to_obj(node.name)}
    if isinstance(node, Declaration):
        return {
            "type": "Declaration",
            "tag": ast_to_obj(node.tag),
            "name": ast_to_obj(node.name),
            "initializer": ast_to_obj(node.initializer),
        }
    if isinstance(node, DeclarationGroup):
        return {"type": "DeclarationGroup", "declarations": [ast_to_obj(d) for d in node.declarations]}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, While):
        return {"type": "While", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, NewLine):
        return {"type": "NewLine"}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    marker = obj.get("__type__")
    if marker == "Char":
        return CharVal(obj["value"])
    if marker == "Token":
        return token_from_obj(obj)
    if marker == "TypeTag":
        return TypeTag[obj["value"]]

    t = obj.get("type")
    if t == "Literal":
        return Literal(value=ast_from_obj(obj["value"]))
    if t == "Grouping":
        return Grouping(expression=ast_from_obj(obj["expression"]))
    if t == "Unary":
        return Unary(operator=ast_from_obj(obj["operator"]), right=ast_from_obj(obj["right"]))
    if t == "Binary":
        return Binary(
            left=ast_from_obj(obj["left"]),
            operator=ast_from_obj(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Logical":
        return Logical(
            left=ast_from_obj(obj["left"]),
            operator=ast_from_obj(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Variable":
        return Variable(name=ast_from_obj(obj["name"]))
    if t == "Assign":
        return Assign(name=ast_from_obj(obj["name"]), value=ast_from_obj(obj["value"]))
    if t == "ExpressionStmt":
        return ExpressionStmt(expression=ast_from_obj(obj["expression"]))
    if t == "Display":
        return Display(expression=ast_from_obj(obj["expression"]))
    if t == "Scan":
        return Scan(name=ast_from_obj(obj["name"]))
    if t == "Declaration":
        return Declaration(
            tag=ast_from_obj(obj["tag"]),
            name=ast_from_obj(obj["name"]),
            initializer=ast_from_obj(obj.get("initializer")),
        )
    if t == "DeclarationGroup":
        return DeclarationGroup(declarations=[ast_from_obj(d) for d in obj["declarations"]])
    if t == "Block":
        return Block(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            then_branch=ast_from_obj(obj["then_branch"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
        )
    if t == "While":
        return While(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "NewLine":
        return NewLine()

    raise ValueError(f"Unknown AST node type: {t}")
