from __future__ import annotations
from typing import List, Optional

from .ast_nodes import *
from .errors import ParserError
from .lexer import Token, TokenType, tokenize

MULTIPLICATIVE_OPS = ("*", "/", "%")
ADDITIVE_OPS = ("+", "-")
COMPARISON_OPS = ("<", ">")


class TokenStream:
    """Cursor over an immutable token list. The trailing EOF token is never consumed."""

    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].kind is not TokenType.EOF:
            tokens = list(tokens) + [Token(TokenType.EOF, "EndOfFile")]
        self.tokens = tokens
        self.i = 0

    def peek(self) -> Token:
        return self.tokens[min(self.i, len(self.tokens) - 1)]

    def at_end(self) -> bool:
        return self.peek().kind is TokenType.EOF

    def advance(self) -> Token:
        tok = self.peek()
        if tok.kind is not TokenType.EOF:
            self.i += 1
        return tok

    def check(self, ttype: TokenType) -> bool:
        return self.peek().kind is ttype

    def match(self, ttype: TokenType) -> Optional[Token]:
        if self.check(ttype):
            return self.advance()
        return None

    def check_operator(self, ops) -> bool:
        tok = self.peek()
        return tok.kind is TokenType.BINARY_OPERATOR and tok.lexeme in ops

    def expect(self, ttype: TokenType, err: str) -> Token:
        tok = self.peek()
        if tok.kind is not ttype:
            raise ParserError(
                f"{err} Expecting: {ttype.name}. Got: {tok.kind.name}.",
                tok.line,
                tok.column,
            )
        return self.advance()


def _loc(tok: Token):
    return {"line": tok.line, "column": tok.column}


class Parser:
    def __init__(self, tokens: List[Token]):
        self.ts = TokenStream(tokens)

    def parse_program(self) -> Program:
        prog = Program(line=1, column=1)
        while not self.ts.at_end():
            prog.body.append(self.parse_stmt())
        return prog

    # ---------------- STATEMENTS ----------------
    def parse_stmt(self) -> Stmt:
        ttype = self.ts.peek().kind

        if ttype in (TokenType.LET, TokenType.CONST):
            return self.parse_var_declaration()

        if ttype is TokenType.FN:
            return self.parse_function_declaration()

        if ttype is TokenType.READ:
            return self.parse_read()

        # Otherwise: expression statement, the semicolon is optional
        expr = self.parse_expr()
        self.ts.match(TokenType.SEMICOLON)
        return expr

    def parse_var_declaration(self) -> VarDeclaration:
        keyword = self.ts.advance()
        constant = keyword.kind is TokenType.CONST
        name_tok = self.ts.expect(
            TokenType.IDENTIFIER,
            "Expected identifier name following let | const keywords.",
        )
        decl = VarDeclaration(identifier=name_tok.lexeme, constant=constant, **_loc(keyword))

        if self.ts.match(TokenType.EQUALS):
            read_tok = self.ts.match(TokenType.READ)
            if read_tok:
                self.ts.expect(
                    TokenType.SEMICOLON,
                    "Expected a semicolon after 'read' in variable declaration.",
                )
                decl.value = Read(variable=name_tok.lexeme, **_loc(read_tok))
                return decl

            decl.value = self.parse_expr()
            self.ts.expect(TokenType.SEMICOLON, "Variable declaration statement must end with ';'.")
            return decl

        self.ts.expect(TokenType.SEMICOLON, "Variable declaration statement must end with ';'.")
        if constant:
            raise ParserError(
                "Must assign value to constant expression. No value provided.",
                keyword.line,
                keyword.column,
            )
        return decl

    def parse_function_declaration(self) -> FunctionDeclaration:
        t_fn = self.ts.expect(TokenType.FN, "Expected 'fn' keyword.")
        name_tok = self.ts.expect(
            TokenType.IDENTIFIER,
            "Expected function name following fn keyword.",
        )

        params: List[str] = []
        for arg in self.parse_args():
            if not isinstance(arg, Identifier):
                raise ParserError(
                    "Inside function declaration expected parameters to be identifiers.",
                    arg.line,
                    arg.column,
                )
            params.append(arg.symbol)

        self.ts.expect(TokenType.OPEN_BRACE, "Expected function body following declaration.")
        body: List[Stmt] = []
        while not self.ts.at_end() and not self.ts.check(TokenType.CLOSE_BRACE):
            body.append(self.parse_stmt())
        self.ts.expect(TokenType.CLOSE_BRACE, "Closing brace expected inside function declaration.")

        return FunctionDeclaration(name=name_tok.lexeme, parameters=params, body=body, **_loc(t_fn))

    def parse_read(self) -> Read:
        t_read = self.ts.expect(TokenType.READ, "Expected 'read' keyword.")
        name_tok = self.ts.expect(TokenType.IDENTIFIER, "Expected an identifier after 'read'.")
        self.ts.expect(TokenType.SEMICOLON, "Expected a semicolon after 'read'.")
        return Read(variable=name_tok.lexeme, standalone=True, **_loc(t_read))

    # ---------------- EXPRESSIONS (precedence) ----------------
    def parse_expr(self) -> Expr:
        if self.ts.check(TokenType.OPEN_BRACKET):
            return self.parse_array_declaration()
        if self.ts.check(TokenType.READ):
            return self.parse_read()
        return self.parse_assignment_expr()

    def parse_array_declaration(self) -> ArrayDeclaration:
        t_open = self.ts.expect(TokenType.OPEN_BRACKET, "Expected '[' to open array literal.")
        elements: List[Expr] = []
        while not self.ts.at_end() and not self.ts.check(TokenType.CLOSE_BRACKET):
            elements.append(self.parse_expr())
            if self.ts.match(TokenType.COMMA) is None:
                break
        self.ts.expect(TokenType.CLOSE_BRACKET, "Expected ']' to close array literal.")
        return ArrayDeclaration(elements=elements, **_loc(t_open))

    def parse_assignment_expr(self) -> Expr:
        left = self.parse_object_expr()
        if self.ts.match(TokenType.EQUALS):
            value = self.parse_expr()
            return AssignmentExpr(assigne=left, value=value, line=left.line, column=left.column)
        return left

    def parse_object_expr(self) -> Expr:
        if not self.ts.check(TokenType.OPEN_BRACE):
            return self.parse_comparison_expr()

        t_open = self.ts.advance()
        properties: List[Property] = []

        while not self.ts.at_end() and not self.ts.check(TokenType.CLOSE_BRACE):
            key_tok = self.ts.expect(TokenType.IDENTIFIER, "Object literal key expected.")

            # shorthand: { key, }
            if self.ts.match(TokenType.COMMA):
                properties.append(Property(key=key_tok.lexeme, **_loc(key_tok)))
                continue
            # shorthand: { key }
            if self.ts.check(TokenType.CLOSE_BRACE):
                properties.append(Property(key=key_tok.lexeme, **_loc(key_tok)))
                continue

            # { key: value }
            self.ts.expect(TokenType.COLON, "Missing ':' following identifier in ObjectExpr.")
            value = self.parse_expr()
            properties.append(Property(key=key_tok.lexeme, value=value, **_loc(key_tok)))

            if not self.ts.check(TokenType.CLOSE_BRACE):
                self.ts.expect(TokenType.COMMA, "Expected ',' or '}' following property.")

        self.ts.expect(TokenType.CLOSE_BRACE, "Object literal missing '}'.")
        return ObjectLiteral(properties=properties, **_loc(t_open))

    def parse_comparison_expr(self) -> Expr:
        expr = self.parse_additive_expr()
        while self.ts.check_operator(COMPARISON_OPS):
            op_tok = self.ts.advance()
            rhs = self.parse_additive_expr()
            expr = BinaryExpr(left=expr, right=rhs, operator=op_tok.lexeme, **_loc(op_tok))
        return expr

    def parse_additive_expr(self) -> Expr:
        expr = self.parse_multiplicative_expr()
        while self.ts.check_operator(ADDITIVE_OPS):
            op_tok = self.ts.advance()
            rhs = self.parse_multiplicative_expr()
            expr = BinaryExpr(left=expr, right=rhs, operator=op_tok.lexeme, **_loc(op_tok))
        return expr

    def parse_multiplicative_expr(self) -> Expr:
        expr = self.parse_call_member_expr()
        while self.ts.check_operator(MULTIPLICATIVE_OPS):
            op_tok = self.ts.advance()
            rhs = self.parse_call_member_expr()
            expr = BinaryExpr(left=expr, right=rhs, operator=op_tok.lexeme, **_loc(op_tok))
        return expr

    def parse_call_member_expr(self) -> Expr:
        """foo.bar[0](1, 2)() and so on, left to right."""
        expr = self.parse_primary_expr()
        while True:
            if self.ts.match(TokenType.DOT):
                tok = self.ts.peek()
                if tok.kind is not TokenType.IDENTIFIER:
                    raise ParserError(
                        "Cannot use '.' operator without right hand side being an identifier.",
                        tok.line,
                        tok.column,
                    )
                self.ts.advance()
                prop = Identifier(symbol=tok.lexeme, **_loc(tok))
                expr = MemberExpr(object=expr, property=prop, computed=False, line=expr.line, column=expr.column)
            elif self.ts.match(TokenType.OPEN_BRACKET):
                prop = self.parse_expr()
                self.ts.expect(TokenType.CLOSE_BRACKET, "Missing ']' in computed value.")
                expr = MemberExpr(object=expr, property=prop, computed=True, line=expr.line, column=expr.column)
            elif self.ts.check(TokenType.OPEN_PAREN):
                args = self.parse_args()
                expr = CallExpr(caller=expr, args=args, line=expr.line, column=expr.column)
            else:
                break
        return expr

    def parse_args(self) -> List[Expr]:
        self.ts.expect(TokenType.OPEN_PAREN, "Expected '('.")
        args: List[Expr] = []
        if not self.ts.check(TokenType.CLOSE_PAREN):
            args.append(self.parse_expr())
            while self.ts.match(TokenType.COMMA):
                args.append(self.parse_expr())
        self.ts.expect(TokenType.CLOSE_PAREN, "Missing ')' inside arguments list.")
        return args

    def parse_primary_expr(self) -> Expr:
        tok = self.ts.peek()

        if self.ts.match(TokenType.IDENTIFIER):
            return Identifier(symbol=tok.lexeme, **_loc(tok))

        if self.ts.match(TokenType.NUMBER):
            return NumericLiteral(value=float(tok.lexeme), **_loc(tok))

        if self.ts.match(TokenType.STRING):
            return StringLiteral(value=tok.lexeme, **_loc(tok))

        if self.ts.match(TokenType.OPEN_PAREN):
            expr = self.parse_expr()
            self.ts.expect(
                TokenType.CLOSE_PAREN,
                "Unexpected token found inside parenthesised expression. Expected ')'.",
            )
            return expr

        raise ParserError(
            f"Unexpected token {tok.kind.name} ('{tok.lexeme}') found during parsing.",
            tok.line,
            tok.column,
        )


def parse(source: str) -> Program:
    return Parser(tokenize(source)).parse_program()
