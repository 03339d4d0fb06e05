import logging
import os
import time

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..schemas import PROD_ENVIRONMENT
from ...dependencies.dependency_container import dependency_container
from ...internal.utilities.general_utilities import retrieve_ip_address

class TimingMiddleware(BaseHTTPMiddleware):

    VALID_API_METHODS = ["POST", "PATCH", "GET", "DELETE"]
    IRRELEVANT_PATHS = ["/", "/openapi.json", "/docs", "/favicon.ico"]
    WALLET_ADDRESS_QUERY_KEY = "walletAddress"
    THERAPIST_ID_QUERY_KEY = "therapistId"

    async def dispatch(
        self,
        request: Request,
        call_next,
    ):
        cls = type(self)
        start_time = time.perf_counter()
        request_url_path = request.url.path
        request_method = request.method
        influx_client = dependency_container.inject_influx_client()
        wallet_address = request.query_params.get(cls.WALLET_ADDRESS_QUERY_KEY, None)
        therapist_id = request.query_params.get(cls.THERAPIST_ID_QUERY_KEY, None)

        should_log_request = self._should_log_request(
            environment=os.environ.get("ENVIRONMENT"),
            request_method=request_method,
            request_url_path=request_url_path
        )
        if should_log_request:
            await run_in_threadpool(
                influx_client.log_api_request,
                endpoint_name=request_url_path,
                method=request_method,
                wallet_address=wallet_address,
                therapist_id=therapist_id
            )

        response = await call_next(request)

        # Milliseconds
        response_time_ms = (time.perf_counter() - start_time) * 1000
        logging.info(
            f"{request_method} {request_url_path} {response.status_code} "
            f"{response_time_ms:.1f}ms ({retrieve_ip_address(request)})"
        )

        if should_log_request:
            await run_in_threadpool(
                influx_client.log_api_response,
                endpoint_name=request_url_path,
                method=request_method,
                response_time=response_time_ms,
                status_code=response.status_code,
                wallet_address=wallet_address,
                therapist_id=therapist_id
            )
        return response

    # Private methods

    def _should_log_request(
        self,
        environment: str | None,
        request_method: str,
        request_url_path: str,
    ) -> bool:
        return (
            environment == PROD_ENVIRONMENT
            and request_method in self.VALID_API_METHODS
            and request_url_path not in self.IRRELEVANT_PATHS
        )
