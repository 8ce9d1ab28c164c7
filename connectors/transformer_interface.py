from typing import Protocol


class SourceTransformer(Protocol):
    """
    Protocol for objects that convert one file's text into the target dialect.
    The dialect being read is fixed when the transformer is built.
    """

    @property
    def dialect(self) -> str: ...

    def convert(self, text: str) -> str:
        """
        Return ``text`` converted to the target dialect.
        Raises mirror.errors.TransformSyntaxError for input the transformer cannot parse.
        """
        ...
