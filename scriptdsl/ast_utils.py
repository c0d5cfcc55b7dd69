# scriptdsl/ast_utils.py
from typing import Any, Dict
from .parser import (Program, Assignment, Number, String, Boolean, Variable,
                     ListLiteral, UnaryOp, BinOp, Call)

def ast_to_dict(node) -> Dict[str, Any]:
    if isinstance(node, Program):
        return {"type": "Program", "statements": [ast_to_dict(s) for s in node.statements]}
    if isinstance(node, Assignment):
        return {"type": "Assignment", "name": node.name, "value": ast_to_dict(node.value)}
    if isinstance(node, (Number, String, Boolean)):
        return {"type": type(node).__name__, "value": node.value}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": node.name}
    if isinstance(node, ListLiteral):
        return {"type": "List", "items": [ast_to_dict(i) for i in node.items]}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op, "operand": ast_to_dict(node.operand)}
    if isinstance(node, BinOp):
        return {"type": "BinOp", "op": node.op, "left": ast_to_dict(node.left), "right": ast_to_dict(node.right)}
    if isinstance(node, Call):
        return {"type": "Call", "name": node.name, "statement": node.statement,
                "args": [ast_to_dict(a) for a in node.args]}
    return {"type": "Unknown", "repr": repr(node)}

def ast_to_pretty(node, indent: str = "  ") -> str:
    lines = []
    def rec(n, depth=0, label=None):
        pad = indent * depth
        pre = f"{label}: " if label else ""
        if isinstance(n, Program):
            lines.append(f"{pad}{pre}Program")
            for i, s in enumerate(n.statements):
                rec(s, depth+1, f"stmt[{i}]")
        elif isinstance(n, Assignment):
            lines.append(f"{pad}{pre}Assignment(${n.name})")
            rec(n.value, depth+1, "value")
        elif isinstance(n, (Number, String, Boolean)):
            lines.append(f"{pad}{pre}{type(n).__name__}({n.value!r})")
        elif isinstance(n, Variable):
            lines.append(f"{pad}{pre}Variable(${n.name})")
        elif isinstance(n, ListLiteral):
            lines.append(f"{pad}{pre}List")
            for i, item in enumerate(n.items):
                rec(item, depth+1, f"item[{i}]")
        elif isinstance(n, UnaryOp):
            lines.append(f"{pad}{pre}UnaryOp({n.op})")
            rec(n.operand, depth+1, "operand")
        elif isinstance(n, BinOp):
            lines.append(f"{pad}{pre}BinOp({n.op})")
            rec(n.left, depth+1, "left")
            rec(n.right, depth+1, "right")
        elif isinstance(n, Call):
            kind = "statement" if n.statement else "value"
            lines.append(f"{pad}{pre}Call({n.name}, {kind})")
            for i, a in enumerate(n.args):
                rec(a, depth+1, f"arg[{i}]")
        else:
            lines.append(f"{pad}{pre}{type(n).__name__}")
    rec(node)
    return "\n".join(lines)
