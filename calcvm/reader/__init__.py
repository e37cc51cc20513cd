from calcvm.reader.lexer import lex
from calcvm.reader.parser import TokenStream, parse, parse_expression

__all__ = ["lex", "TokenStream", "parse", "parse_expression"]
