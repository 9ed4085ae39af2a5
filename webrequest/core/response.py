from typing import Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

TextProducer = Callable[[], Optional[str]]
BinaryProducer = Callable[[], Optional[bytes]]


class Response(BaseModel):
    """The immutable result of a successful transaction.

    Depending on the materialization mode, ``text_body`` and ``binary_body`` hold
    eagerly read values, lazy producers that read the response buffer when
    invoked, or None. Use the ``text`` and ``data`` properties to read either form.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool = Field()
    response_code: int = Field()
    text_body: Union[str, TextProducer, None] = Field(default=None, exclude=True)
    binary_body: Union[bytes, BinaryProducer, None] = Field(default=None, exclude=True)

    @property
    def text(self) -> Optional[str]:
        """The response body as text, reading the buffer now if it is lazy."""
        if callable(self.text_body):
            return self.text_body()
        return self.text_body

    @property
    def data(self) -> Optional[bytes]:
        """The response body as bytes, reading the buffer now if it is lazy."""
        if callable(self.binary_body):
            return self.binary_body()
        return self.binary_body

    @property
    def is_lazy(self) -> bool:
        return callable(self.text_body) or callable(self.binary_body)
