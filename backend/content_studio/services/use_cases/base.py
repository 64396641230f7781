"""
Base use case class.

Each use case encapsulates a single business operation and stays
independent of HTTP, so the same operation can be driven from a route, a
CLI or a test:

    >>> use_case = GenerationUseCase()
    >>> response = await use_case.execute(GenerationRequest(title="Hidden badges"))
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class UseCase(ABC, Generic[RequestT, ResponseT]):
    """
    Base use case abstract class.

    Type Parameters:
        RequestT: Type of the input request object
        ResponseT: Type of the output response object
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        """
        Execute the use case and return a response.

        Raises:
            Domain exceptions (ValidationError, PipelineError, ...). HTTP
            exceptions are the route's responsibility.
        """
