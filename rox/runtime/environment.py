"""Variable environment: a stack of lexical scopes, innermost last. The outermost (global) scope lives as long as the
Environment does.
"""

from contextlib import contextmanager

from rox.lang.error import RoxException, UndefinedVariable, UninitializedVariable


class Environment:
    """Stack of scopes mapping names to Values. A name bound to None is declared but uninitialized (which differs from
    being bound to Nil).
    """

    def __init__(self):
        self.scopes = [{}]

    @property
    def depth(self):
        return len(self.scopes)

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        if len(self.scopes) == 1:
            raise RoxException("cannot end the global scope", internal=True)
        self.scopes.pop()

    @contextmanager
    def scope(self):
        """Runs the with-body in a new scope, which is ended even if the body raises."""
        self.begin_scope()
        try:
            yield self
        finally:
            self.end_scope()

    def define(self, name, value=None):
        """Binds name in the innermost scope, replacing any binding of name already in that scope."""
        self.scopes[-1][name] = value

    def _find(self, name):
        for scope in reversed(self.scopes):
            if name in scope:
                return scope
        raise UndefinedVariable(name)

    def get(self, name):
        value = self._find(name)[name]
        if value is None:
            raise UninitializedVariable(name)
        return value

    def assign(self, name, value):
        """Overwrites the nearest binding of name. Returns value."""
        self._find(name)[name] = value
        return value
