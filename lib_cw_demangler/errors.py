class DemangleError(ValueError):
    """
    Raised when a symbol doesn't follow the CodeWarrior mangling grammar.
    fragment is the part of the input that couldn't be parsed.
    """
    def __init__(self, message: str, fragment: str = ''):
        if fragment:
            message = f'{message} (at "{fragment}")'
        super().__init__(message)
        self.fragment = fragment
