"""rox: a small scripting language. Source text is turned into tokens (rox.lang.lexer), parsed into an abstract syntax
tree (rox.lang.parser) and executed by a tree-walking interpreter (rox.runtime.interpreter).
"""

from rox.lang.parser import parse
from rox.runtime.interpreter import Interpreter

__version__ = "0.1.0"
