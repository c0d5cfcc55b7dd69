import ast

from lark import Lark, Transformer, v_args
from lark.exceptions import LarkError, VisitError

from .errors import ScriptParseError

GRAMMAR = r"""
?start: program
program: (statement ";"?)*
?statement: assignment
          | func_call           -> call_statement
assignment: VARIABLE "=" expr
?expr: or_expr
?or_expr: and_expr
        | or_expr "||" and_expr     -> or_
?and_expr: cmp_expr
         | and_expr "&&" cmp_expr   -> and_
?cmp_expr: add_expr
         | cmp_expr "==" add_expr   -> eq
         | cmp_expr "!=" add_expr   -> ne
         | cmp_expr ">" add_expr    -> gt
         | cmp_expr ">=" add_expr   -> ge
         | cmp_expr "<" add_expr    -> lt
         | cmp_expr "<=" add_expr   -> le
?add_expr: mul_expr
         | add_expr "+" mul_expr    -> add
         | add_expr "-" mul_expr    -> sub
?mul_expr: pow_expr
         | mul_expr "*" pow_expr    -> mul
         | mul_expr "/" pow_expr    -> div
         | mul_expr "%" pow_expr    -> mod
?pow_expr: unary_expr
         | unary_expr "^" pow_expr  -> pow
?unary_expr: "-" unary_expr         -> neg
           | "!" unary_expr         -> not_
           | atom
?atom: NUMBER        -> number
     | STRING        -> string
     | "true"        -> true
     | "false"       -> false
     | VARIABLE      -> variable
     | func_call
     | "[" [args] "]" -> list_
     | "(" expr ")"
func_call: NAME "(" [args] ")"
args: expr ("," expr)*
VARIABLE: /\$[a-zA-Z_][a-zA-Z0-9_]*/
NAME: /[a-zA-Z_][a-zA-Z0-9_]*/
NUMBER: /(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?/
STRING: /"(\\.|[^"\\])*"/ | /'[^'\n]*'/
COMMENT: /#[^\n]*/
%ignore COMMENT
%ignore /[ \t\r\n]+/
"""

parser = Lark(GRAMMAR, start="start", parser="lalr")

class Node: ...
class Program(Node):
    def __init__(self, statements): self.statements = statements
class Assignment(Node):
    def __init__(self, name, value): self.name, self.value = name, value
class Number(Node):
    def __init__(self, value): self.value = value
class String(Node):
    def __init__(self, value): self.value = value
class Boolean(Node):
    def __init__(self, value): self.value = value
class Variable(Node):
    def __init__(self, name): self.name = name
class ListLiteral(Node):
    def __init__(self, items): self.items = items
class BinOp(Node):
    def __init__(self, op, left, right): self.op, self.left, self.right = op, left, right
class UnaryOp(Node):
    def __init__(self, op, operand): self.op, self.operand = op, operand
class Call(Node):
    # statement is True when the call stands alone rather than producing a value
    def __init__(self, name, args, statement=False):
        self.name, self.args, self.statement = name, args, statement


def _binop(op):
    def build(self, a, b):
        return BinOp(op, a, b)
    return build


@v_args(inline=True)
class ASTBuilder(Transformer):
    def program(self, *statements): return Program(list(statements))

    def assignment(self, var, value): return Assignment(str(var)[1:], value)

    def call_statement(self, call):
        call.statement = True
        return call

    def number(self, tok):
        text = str(tok)
        return Number(int(text) if text.isdigit() else float(text))

    def string(self, tok): return String(ast.literal_eval(str(tok)))
    def true(self): return Boolean(True)
    def false(self): return Boolean(False)
    def variable(self, tok): return Variable(str(tok)[1:])
    def list_(self, items=None): return ListLiteral(list(items or []))

    def func_call(self, name, args=None):
        return Call(str(name), list(args or []))

    def args(self, *xs): return list(xs)

    or_ = _binop("||")
    and_ = _binop("&&")
    eq = _binop("==")
    ne = _binop("!=")
    gt = _binop(">")
    ge = _binop(">=")
    lt = _binop("<")
    le = _binop("<=")
    add = _binop("+")
    sub = _binop("-")
    mul = _binop("*")
    div = _binop("/")
    mod = _binop("%")
    pow = _binop("^")

    def neg(self, operand): return UnaryOp("-", operand)
    def not_(self, operand): return UnaryOp("!", operand)


def parse_script(src: str) -> Program:
    try:
        return ASTBuilder().transform(parser.parse(src))
    except VisitError as e:
        raise ScriptParseError(f"Could not parse script: {e.orig_exc}") from e.orig_exc
    except LarkError as e:
        raise ScriptParseError(f"Could not parse script: {e}") from e
