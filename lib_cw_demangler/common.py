import enum

class ErrorVolume(enum.Enum):
    """
    How loudly to complain about a symbol that couldn't be demangled
    """
    ERROR = 'error'
    WARNING = 'warning'
    SILENT = 'silent'

    @classmethod
    def default(cls):
        return cls.WARNING

    def report(self, message: str, file) -> None:
        """
        Print message to file, prefixed according to the volume (or not
        at all, if silent)
        """
        if self is ErrorVolume.SILENT:
            return
        print(f'{self.name}: {message}', file=file)
