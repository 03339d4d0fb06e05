from abc import ABC, abstractmethod

class InfluxBaseClass(ABC):

    # Tags that callers may attach to any point, on top of endpoint, method and environment.
    OPTIONAL_TAGS = ("date",
                     "status_code",
                     "therapist_id",
                     "wallet_address")

    def monitoring_tags(self, **kwargs) -> dict[str, str]:
        """
        Returns the subset of the incoming keyword arguments that are supported monitoring tags,
        stringified and without empty values.
        """
        return {
            tag: str(kwargs[tag]) for tag in self.OPTIONAL_TAGS
            if kwargs.get(tag) is not None
        }

    @abstractmethod
    def log_api_request(
        self,
        endpoint_name: str,
        method: str,
        **kwargs
    ):
        """
        Records an incoming API request.

        Arguments:
        endpoint_name – the request path.
        method – the HTTP method.
        kwargs – optional monitoring tags (see OPTIONAL_TAGS).
        """
        pass

    @abstractmethod
    def log_api_response(
        self,
        endpoint_name: str,
        method: str,
        response_time: float,
        **kwargs
    ):
        """
        Records an API response along with its latency.

        Arguments:
        endpoint_name – the request path.
        method – the HTTP method.
        response_time – the time it took to respond, in milliseconds.
        kwargs – optional monitoring tags (see OPTIONAL_TAGS).
        """
        pass

    @abstractmethod
    def log_error(
        self,
        endpoint_name: str,
        method: str,
        error_code: int,
        description: str,
        **kwargs
    ):
        """
        Records a failed API invocation.

        Arguments:
        endpoint_name – the request path.
        method – the HTTP method.
        error_code – the HTTP status code returned to the client.
        description – the client-facing error detail.
        kwargs – optional monitoring tags (see OPTIONAL_TAGS).
        """
        pass
