"""
Recursive Descent Parser for Skiff

Turns the lexer's token stream into the lark Tree shapes the evaluator
dispatches on. Parsing is purely syntactic: every tree it returns is
well-formed, so the evaluator never re-checks grammar.

Expression precedence (lowest to highest):
1. assignment (=), right associative
2. equality (==, !=)
3. comparison (<, <=, >, >=)
4. term (+, -)
5. factor (*)
6. unary (-)
7. postfix (.field, .method(args), [index], (call))
8. primary (literals, identifiers, parens, arrays, records)
"""

from typing import List, Optional

from lark import Token, Tree

from .token_types import TT, Tok
from .tree import make_meta, tree_label

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        self.column = token.column if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )

_COMPARE_OPS = (TT.LT, TT.LTE, TT.GT, TT.GTE)
_EQUALITY_OPS = (TT.EQ, TT.NEQ)

class Parser:
    """Recursive descent parser for Skiff."""

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Tok(TT.EOF, None, 0, 0)

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return Tok(TT.EOF, None, 0, 0)

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current = self.tokens[self.pos]
        else:
            self.current = Tok(TT.EOF, None, prev.line, prev.column)
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {token_type.name}, got {self.current.type.name}"
            raise ParseError(msg, self.current)
        return self.advance()

    # ========================================================================
    # Node Construction
    # ========================================================================

    @staticmethod
    def node(label: str, children: list, tok: Tok) -> Tree:
        """Build a Tree whose meta points at `tok`."""
        return Tree(label, children, meta=make_meta(tok.line, tok.column))

    @staticmethod
    def leaf(kind: str, tok: Tok, value: Optional[str] = None) -> Token:
        text = tok.value if value is None else value
        return Token(kind, text, line=tok.line, column=tok.column)

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Tree:
        """Parse entire program"""
        first = self.current
        stmts = []

        while not self.check(TT.EOF):
            stmts.append(self.parse_statement())

        return self.node('stmtlist', stmts, first)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Tree:
        if self.check(TT.VAR):
            return self.parse_var_decl()
        if self.check(TT.FUN):
            return self.parse_fun_decl()
        if self.check(TT.PRINT):
            return self.parse_print_stmt()
        if self.check(TT.RETURN):
            return self.parse_return_stmt()
        if self.check(TT.WHILE):
            return self.parse_while_stmt()
        if self.check(TT.FOR):
            return self.parse_for_stmt()
        if self.check(TT.IF):
            return self.parse_if_stmt()
        if self.check(TT.LBRACE):
            return self.parse_block()

        return self.parse_expr_stmt()

    def parse_var_decl(self) -> Tree:
        """var name [= expr];"""
        var_tok = self.expect(TT.VAR)
        name = self.expect(TT.IDENT, "Expected variable name after 'var'")
        children = [self.leaf('IDENT', name)]

        if self.match(TT.ASSIGN):
            children.append(self.parse_expr())

        self.expect(TT.SEMI, "Expected ';' after variable declaration")
        return self.node('vardecl', children, var_tok)

    def parse_fun_decl(self) -> Tree:
        """fun name(params) { body }"""
        fun_tok = self.expect(TT.FUN)
        name = self.expect(TT.IDENT, "Expected function name after 'fun'")
        params = self.parse_param_list()
        body_tok = self.expect(TT.LBRACE, "Expected '{' before function body")
        body = self.node('stmtlist', self.parse_block_items(), body_tok)

        return self.node('fndef', [self.leaf('IDENT', name), params, body], fun_tok)

    def parse_param_list(self) -> Tree:
        lpar = self.expect(TT.LPAR, "Expected '(' after function name")
        names = []
        seen = set()

        if not self.check(TT.RPAR):
            while True:
                tok = self.expect(TT.IDENT, "Expected parameter name")
                if tok.value in seen:
                    raise ParseError(f"Duplicate parameter '{tok.value}'", tok)
                seen.add(tok.value)
                names.append(self.leaf('IDENT', tok))

                if not self.match(TT.COMMA):
                    break

        self.expect(TT.RPAR, "Expected ')' after parameters")
        return self.node('paramlist', names, lpar)

    def parse_print_stmt(self) -> Tree:
        print_tok = self.expect(TT.PRINT)
        expr = self.parse_expr()
        self.expect(TT.SEMI, "Expected ';' after print")
        return self.node('printstmt', [expr], print_tok)

    def parse_return_stmt(self) -> Tree:
        ret_tok = self.expect(TT.RETURN)
        children = []

        if not self.check(TT.SEMI):
            children.append(self.parse_expr())

        self.expect(TT.SEMI, "Expected ';' after return value")
        return self.node('returnstmt', children, ret_tok)

    def parse_condition(self) -> Tree:
        self.expect(TT.LPAR, "Expected '(' before condition")
        cond = self.parse_expr()
        self.expect(TT.RPAR, "Expected ')' after condition")
        return cond

    def parse_while_stmt(self) -> Tree:
        """while (expr) statement"""
        while_tok = self.expect(TT.WHILE)
        cond = self.parse_condition()
        body = self.parse_statement()
        return self.node('whilestmt', [cond, body], while_tok)

    def parse_if_stmt(self) -> Tree:
        """if (expr) statement [else statement]"""
        if_tok = self.expect(TT.IF)
        cond = self.parse_condition()
        then_body = self.parse_statement()

        if self.match(TT.ELSE):
            else_body = self.parse_statement()
        else:
            else_body = self.node('stmtlist', [], if_tok)

        return self.node('ifstmt', [cond, then_body, else_body], if_tok)

    def parse_for_stmt(self) -> Tree:
        """
        for (init; cond; step) statement

        Desugared into:
            { init; while (cond) { statement; step; } }
        """
        for_tok = self.expect(TT.FOR)
        self.expect(TT.LPAR, "Expected '(' after 'for'")

        init = None
        if self.check(TT.VAR):
            init = self.parse_var_decl()
        elif not self.match(TT.SEMI):
            init = self.parse_expr_stmt()

        if self.check(TT.SEMI):
            cond = self.leaf('TRUE', self.current, 'true')
        else:
            cond = self.parse_expr()
        self.expect(TT.SEMI, "Expected ';' after loop condition")

        step = None
        if not self.check(TT.RPAR):
            step_tok = self.current
            step = self.node('exprstmt', [self.parse_expr()], step_tok)
        self.expect(TT.RPAR, "Expected ')' after for clauses")

        body = self.parse_statement()
        loop_body = [body] if step is None else [body, step]
        loop = self.node('whilestmt', [cond, self.node('block', loop_body, for_tok)], for_tok)

        outer = [loop] if init is None else [init, loop]
        return self.node('block', outer, for_tok)

    def parse_block(self) -> Tree:
        lbrace = self.expect(TT.LBRACE)
        return self.node('block', self.parse_block_items(), lbrace)

    def parse_block_items(self) -> List[Tree]:
        """Statements up to and including the closing brace."""
        stmts = []

        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                raise ParseError("Missing closing brace '}'", self.current)
            stmts.append(self.parse_statement())

        self.advance()
        return stmts

    def parse_expr_stmt(self) -> Tree:
        start = self.current
        expr = self.parse_expr()
        self.expect(TT.SEMI, "Expected ';' after expression")
        return self.node('exprstmt', [expr], start)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self):
        return self.parse_assignment()

    def parse_assignment(self):
        start = self.current
        target = self.parse_equality()

        if not self.check(TT.ASSIGN):
            return target

        eq_tok = self.advance()
        value = self.parse_assignment()

        if isinstance(target, Token) and target.type == 'IDENT':
            return self.node('assign', [target, value], start)

        if tree_label(target) == 'getitem':
            base, key = target.children
            return self.node('setitem', [base, key, value], start)

        raise ParseError("Invalid assignment target", eq_tok)

    def _parse_binary(self, label: str, ops: tuple, operand) -> Tree:
        start = self.current
        left = operand()

        while self.check(*ops):
            op = self.advance()
            right = operand()
            left = self.node(label, [left, Token(op.type.name, op.value), right], start)

        return left

    def parse_equality(self):
        return self._parse_binary('compare', _EQUALITY_OPS, self.parse_comparison)

    def parse_comparison(self):
        return self._parse_binary('compare', _COMPARE_OPS, self.parse_term)

    def parse_term(self):
        return self._parse_binary('addexpr', (TT.PLUS, TT.MINUS), self.parse_factor)

    def parse_factor(self):
        return self._parse_binary('mulexpr', (TT.STAR,), self.parse_unary)

    def parse_unary(self):
        if self.check(TT.MINUS):
            minus = self.advance()
            return self.node('neg', [self.parse_unary()], minus)

        return self.parse_postfix()

    def parse_postfix(self):
        """
        Parse postfix chains:
        - calls: expr(args)
        - indexing: expr[index]
        - field access: expr.field
        - method calls: expr.field(args)
        """
        start = self.current
        expr = self.parse_primary()

        while True:
            if self.check(TT.LPAR):
                args = self.parse_args()
                expr = self.node('call', [expr, args], start)
            elif self.match(TT.LSQB):
                key = self.parse_expr()
                self.expect(TT.RSQB, "Expected ']' after index")
                expr = self.node('getitem', [expr, key], start)
            elif self.match(TT.DOT):
                name = self.expect(TT.IDENT, "Expected property name after '.'")
                key = self.leaf('STRING', name)

                if self.check(TT.LPAR):
                    args = self.parse_args()
                    expr = self.node('methodcall', [expr, key, args], start)
                else:
                    expr = self.node('getitem', [expr, key], start)
            else:
                return expr

    def parse_args(self) -> Tree:
        lpar = self.expect(TT.LPAR)
        args = []

        if not self.check(TT.RPAR):
            while True:
                args.append(self.parse_expr())
                if not self.match(TT.COMMA):
                    break

        self.expect(TT.RPAR, "Expected ')' after arguments")
        return self.node('args', args, lpar)

    def parse_primary(self):
        tok = self.current

        if self.match(TT.NUMBER):
            return self.leaf('NUMBER', tok)
        if self.match(TT.STRING):
            return self.leaf('STRING', tok)
        if self.match(TT.TRUE):
            return self.leaf('TRUE', tok)
        if self.match(TT.FALSE):
            return self.leaf('FALSE', tok)
        if self.match(TT.IDENT):
            return self.leaf('IDENT', tok)

        if self.match(TT.LPAR):
            expr = self.parse_expr()
            self.expect(TT.RPAR, "Expected ')' after expression")
            return expr

        if self.match(TT.LSQB):
            items = []
            while not self.check(TT.RSQB):
                items.append(self.parse_expr())
                if not self.match(TT.COMMA):
                    break
            self.expect(TT.RSQB, "Expected ']' after array elements")
            return self.node('array', items, tok)

        if self.match(TT.LBRACE):
            return self.parse_object_body(tok)

        raise ParseError(f"Unexpected {tok.type.name}", tok)

    def parse_object_body(self, lbrace: Tok) -> Tree:
        """Record literal items after the opening brace."""
        items = []

        while not self.check(TT.RBRACE):
            key_tok = self.current
            if not self.match(TT.IDENT, TT.STRING):
                raise ParseError("Expected record key", key_tok)

            self.expect(TT.COLON, "Expected ':' after record key")
            value = self.parse_expr()
            items.append(self.node('objitem', [self.leaf('STRING', key_tok), value], key_tok))

            if not self.match(TT.COMMA):
                break

        self.expect(TT.RBRACE, "Expected '}' after record fields")
        return self.node('object', items, lbrace)


def parse_source(source: str) -> Tree:
    """
    Parse Skiff source code to AST.

    Returns the `stmtlist` root Tree consumed by `evaluator.execute`.
    """
    from .lexer_rd import tokenize

    tokens = tokenize(source)
    parser = Parser(tokens)

    try:
        return parser.parse()
    except RecursionError:
        raise ParseError("Expression nesting too deep", parser.current) from None
