import os

from .fake.fake_async_openai import FakeAsyncOpenAI
from .fake.fake_influx_client import FakeInfluxClient
from .fake.fake_mongo_db_client import FakeMongoDbClient
from .implementation.influx_client import InfluxBaseClass, InfluxClient
from .implementation.mongo_db_client import MongoDbBaseClass, MongoDbClient
from .implementation.openai_client import OpenAIBaseClass, OpenAIClient
from ..internal.schemas import PROD_ENVIRONMENT, TESTING_ENVIRONMENT

class DependencyContainer:
    def __init__(self):
        self._environment = os.environ.get("ENVIRONMENT")
        self._testing_environment = (self._environment == TESTING_ENVIRONMENT)
        self._openai_client = None
        self._influx_client = None
        self._mongo_db_client = None

    def inject_openai_client(self) -> OpenAIBaseClass:
        if self._openai_client is None:
            self._openai_client = FakeAsyncOpenAI() if self._testing_environment else OpenAIClient()
        return self._openai_client

    def inject_influx_client(self) -> InfluxBaseClass:
        if self._influx_client is not None:
            return self._influx_client

        # Metrics are only shipped from prod.
        if self._environment == PROD_ENVIRONMENT and not self._testing_environment:
            self._influx_client = InfluxClient(environment=self._environment)
        else:
            self._influx_client = FakeInfluxClient()
        return self._influx_client

    def inject_mongo_db_client(self) -> MongoDbBaseClass:
        if self._mongo_db_client is None:
            self._mongo_db_client = FakeMongoDbClient() if self._testing_environment else MongoDbClient()
        return self._mongo_db_client

dependency_container = DependencyContainer()
