from fastapi.testclient import TestClient

from ..dependencies.dependency_container import dependency_container
from ..dependencies.fake.fake_async_openai import FakeAsyncOpenAI
from ..dependencies.fake.fake_influx_client import FakeInfluxClient
from ..dependencies.fake.fake_mongo_db_client import FakeMongoDbClient
from ..internal.utilities import datetime_handler, general_utilities
from ..routers.assistant_router import AssistantRouter
from ..routers.availability_router import AvailabilityRouter
from ..routers.therapist_router import TherapistRouter
from ..service_coordinator import EndpointServiceCoordinator

environment = "testing"

class TestingHarnessServiceCoordinator:

    def setup_method(self):
        dependency_container._testing_environment = True
        dependency_container._mongo_db_client = FakeMongoDbClient()
        dependency_container._openai_client = FakeAsyncOpenAI()
        dependency_container._influx_client = FakeInfluxClient()

        coordinator = EndpointServiceCoordinator(routers=[
                                                    AvailabilityRouter().router,
                                                    TherapistRouter().router,
                                                    AssistantRouter().router,
                                                 ],
                                                 environment=environment)
        self.client = TestClient(coordinator.app)

    def test_health_check(self):
        response = self.client.get("/")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_responses_carry_hsts_header(self):
        response = self.client.get("/")
        assert "max-age" in response.headers["Strict-Transport-Security"]

    def test_unknown_route_uses_error_envelope(self):
        response = self.client.get("/unknown")
        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_malformed_json_body(self):
        response = self.client.post(AvailabilityRouter.BOOKING_ENDPOINT,
                                    content="not-json",
                                    headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request payload"

    def test_coordinator_rejects_empty_router_list(self):
        try:
            EndpointServiceCoordinator(routers=[], environment=environment)
            assert False, "Expected the coordinator to reject an empty router list"
        except Exception as e:
            assert "Did not receive any routers" in str(e)

class TestingHarnessUtilities:

    def test_wallet_address_validation(self):
        assert general_utilities.is_valid_wallet_address("0x8ba1f109551bD432803012645Ac136ddd64DBA72")
        assert not general_utilities.is_valid_wallet_address("0x8ba1f109551bD432803012645Ac136ddd64DBA7")
        assert not general_utilities.is_valid_wallet_address("8ba1f109551bD432803012645Ac136ddd64DBA72aa")
        assert not general_utilities.is_valid_wallet_address(None)

    def test_hindi_detection(self):
        assert general_utilities.is_hindi_text("मुझे आज बहुत चिंता हो रही है और मैं रात को ठीक से सो नहीं पाया।")
        assert not general_utilities.is_hindi_text("I am feeling anxious today and could not sleep well last night.")
        assert not general_utilities.is_hindi_text("नम")
        assert not general_utilities.is_hindi_text("")
        assert not general_utilities.is_hindi_text("12345 !!!")

    def test_marathi_is_not_detected_as_hindi(self):
        assert not general_utilities.is_hindi_text(
            "मला आज खूप काळजी वाटत आहे आणि मला रात्री झोप लागली नाही. माझे मन अजिबात शांत नाही."
        )

    def test_extract_status_code_ignores_non_http_codes(self):
        class DriverError(Exception):
            code = 11000

        assert general_utilities.extract_status_code(DriverError(), fallback=500) == 500

    def test_extract_status_code_ignores_driver_codes_in_http_range(self):
        class DriverError(Exception):
            code = 404
            status = 429

        class ConflictError(Exception):
            status_code = 409

        assert general_utilities.extract_status_code(DriverError(), fallback=500) == 500
        assert general_utilities.extract_status_code(ConflictError(), fallback=500) == 409

    def test_slot_time_validation(self):
        assert datetime_handler.is_valid_slot_time("09:00")
        assert datetime_handler.is_valid_slot_time("23:59")
        assert not datetime_handler.is_valid_slot_time("9:00")
        assert not datetime_handler.is_valid_slot_time("24:00")
        assert not datetime_handler.is_valid_slot_time(None)

    def test_date_validation(self):
        assert datetime_handler.is_valid_date("2025-02-28")
        assert not datetime_handler.is_valid_date("2025-02-30")
        assert not datetime_handler.is_valid_date("28-02-2025")
