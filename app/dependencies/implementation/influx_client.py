import os

from datetime import datetime, timezone
from influxdb_client_3 import InfluxDBClient3, Point, write_client_options, WriteOptions
from influxdb_client_3.write_client.client.write_api import WriteType

from ..api.influx_base_class import InfluxBaseClass

class InfluxClient(InfluxBaseClass):

    API_REQUESTS_BUCKET = "api_requests"
    API_RESPONSES_BUCKET = "api_responses"
    API_ERRORS_BUCKET = "errors"

    def __init__(self, environment: str):
        write_client_opts = write_client_options(write_options=WriteOptions(write_type=WriteType.asynchronous),)
        self.client = InfluxDBClient3(host=os.environ.get("INFLUXDB_HOST"),
                                      token=os.environ.get("INFLUXDB_TOKEN"),
                                      org="".join(["mindai-", environment or "dev"]),
                                      write_client_options=write_client_opts)
        self.environment = environment

    def log_api_request(self,
                        endpoint_name: str,
                        method: str,
                        **kwargs):
        point = self._tagged_point(self.API_REQUESTS_BUCKET, endpoint_name, method, **kwargs)
        point.field("request_count", 1).time(datetime.now(timezone.utc).isoformat())
        self.client.write(record=point, database=self.API_REQUESTS_BUCKET)

    def log_api_response(self,
                         endpoint_name: str,
                         method: str,
                         response_time: float,
                         **kwargs):
        point = self._tagged_point(self.API_RESPONSES_BUCKET, endpoint_name, method, **kwargs)
        point.field("response_time", response_time)
        self.client.write(record=point, database=self.API_RESPONSES_BUCKET)

    def log_error(self,
                  endpoint_name: str,
                  method: str,
                  error_code: int,
                  description: str,
                  **kwargs):
        point = self._tagged_point(self.API_ERRORS_BUCKET, endpoint_name, method, **kwargs)
        point.tag("error_code", error_code).field("description", description)
        self.client.write(record=point, database=self.API_ERRORS_BUCKET)

    # Private

    def _tagged_point(self, measurement: str, endpoint_name: str, method: str, **kwargs) -> Point:
        point = (
            Point(measurement)
            .tag("endpoint_name", endpoint_name)
            .tag("environment", self.environment)
            .tag("method", method)
        )
        for tag, value in self.monitoring_tags(**kwargs).items():
            point.tag(tag, value)
        return point
