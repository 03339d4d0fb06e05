from fastapi.testclient import TestClient

from ..dependencies.dependency_container import dependency_container
from ..dependencies.fake.fake_influx_client import FakeInfluxClient
from ..dependencies.fake.fake_mongo_db_client import FakeMongoDbClient
from ..internal.schemas import THERAPISTS_COLLECTION_NAME
from ..routers.therapist_router import TherapistRouter
from ..service_coordinator import EndpointServiceCoordinator

FAKE_WALLET_ADDRESS = "0x8ba1f109551bD432803012645Ac136ddd64DBA72"
FAKE_UNKNOWN_WALLET_ADDRESS = "0x71C7656EC7ab88b098defB751B7401B5f6d8976F"
ENVIRONMENT = "testing"

def build_therapist_payload(**overrides):
    payload = {
        "fullName": "Dr. Meera Iyer",
        "therapistType": "Clinical Psychologist",
        "licenseNumber": "RCI-2231-A",
        "issuingAuthority": "Rehabilitation Council of India",
        "yearsOfExperience": 8,
        "specialties": ["Anxiety", "Depression"],
        "email": "Meera.Iyer@Example.com",
        "walletAddress": FAKE_WALLET_ADDRESS,
        "availability": {
            "days": ["Monday", "Wednesday"],
            "startTime": "09:00",
            "endTime": "17:00"
        },
        "certifications": ["CBT Practitioner"],
        "consultationFeeETH": 0.02,
    }
    payload.update(overrides)
    return payload

class TestingHarnessTherapistRouter:

    def setup_method(self):
        dependency_container._testing_environment = True
        dependency_container._mongo_db_client = FakeMongoDbClient()
        dependency_container._influx_client = FakeInfluxClient()
        self.fake_mongo_db_client = dependency_container.inject_mongo_db_client()

        coordinator = EndpointServiceCoordinator(routers=[TherapistRouter().router],
                                                 environment=ENVIRONMENT)
        self.client = TestClient(coordinator.app)

    def test_add_therapist_with_empty_body(self):
        response = self.client.post(TherapistRouter.THERAPIST_ENDPOINT, json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Request body is missing"}

    def test_add_therapist_with_missing_required_field(self):
        payload = build_therapist_payload()
        del payload["licenseNumber"]
        response = self.client.post(TherapistRouter.THERAPIST_ENDPOINT, json=payload)
        assert response.status_code == 400

    def test_add_therapist_with_invalid_email(self):
        response = self.client.post(TherapistRouter.THERAPIST_ENDPOINT,
                                    json=build_therapist_payload(email="not-an-email"))
        assert response.status_code == 400

    def test_add_therapist_with_negative_fee(self):
        response = self.client.post(TherapistRouter.THERAPIST_ENDPOINT,
                                    json=build_therapist_payload(consultationFeeETH=-1))
        assert response.status_code == 400

    def test_add_therapist_with_invalid_wallet_address(self):
        response = self.client.post(TherapistRouter.THERAPIST_ENDPOINT,
                                    json=build_therapist_payload(walletAddress="0x123"))
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid walletAddress in payload"}

    def test_add_therapist_success(self):
        response = self.client.post(TherapistRouter.THERAPIST_ENDPOINT,
                                    json=build_therapist_payload())
        assert response.status_code == 201
        assert response.json() == {"message": "Therapist data saved successfully"}

        stored_therapist = self.fake_mongo_db_client.collections[THERAPISTS_COLLECTION_NAME][0]
        assert stored_therapist["email"] == "meera.iyer@example.com"
        assert stored_therapist["consultationFeeETH"] == 0.02
        assert stored_therapist["availability"]["startTime"] == "09:00"

    def test_add_therapist_with_duplicate_wallet_address(self):
        self.client.post(TherapistRouter.THERAPIST_ENDPOINT, json=build_therapist_payload())
        response = self.client.post(TherapistRouter.THERAPIST_ENDPOINT, json=build_therapist_payload())
        assert response.status_code == 409
        assert len(self.fake_mongo_db_client.collections[THERAPISTS_COLLECTION_NAME]) == 1

    def test_get_therapist_with_missing_wallet_address(self):
        response = self.client.get(TherapistRouter.THERAPIST_ENDPOINT)
        assert response.status_code == 400
        assert response.json() == {"error": "Wallet address is required"}

    def test_get_therapist_with_invalid_wallet_address(self):
        response = self.client.get(TherapistRouter.THERAPIST_ENDPOINT,
                                   params={"walletAddress": "my-wallet"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid wallet address"}

    def test_get_therapist_not_found(self):
        response = self.client.get(TherapistRouter.THERAPIST_ENDPOINT,
                                   params={"walletAddress": FAKE_UNKNOWN_WALLET_ADDRESS})
        assert response.status_code == 404
        assert response.json() == {"error": "No therapist data found"}

    def test_get_therapist_success(self):
        self.client.post(TherapistRouter.THERAPIST_ENDPOINT, json=build_therapist_payload())
        response = self.client.get(TherapistRouter.THERAPIST_ENDPOINT,
                                   params={"walletAddress": FAKE_WALLET_ADDRESS})
        assert response.status_code == 200

        body = response.json()
        assert body["fullName"] == "Dr. Meera Iyer"
        assert body["walletAddress"] == FAKE_WALLET_ADDRESS
        assert "id" in body

    def test_update_therapist_with_empty_body(self):
        self.client.post(TherapistRouter.THERAPIST_ENDPOINT, json=build_therapist_payload())
        response = self.client.patch(TherapistRouter.THERAPIST_ENDPOINT,
                                     params={"walletAddress": FAKE_WALLET_ADDRESS},
                                     json={})
        assert response.status_code == 400
        assert response.json() == {"error": "No data provided for update"}

    def test_update_therapist_not_found(self):
        response = self.client.patch(TherapistRouter.THERAPIST_ENDPOINT,
                                     params={"walletAddress": FAKE_UNKNOWN_WALLET_ADDRESS},
                                     json={"yearsOfExperience": 10})
        assert response.status_code == 404
        assert response.json() == {"error": "No therapist data found for this wallet address"}

    def test_update_therapist_success(self):
        self.client.post(TherapistRouter.THERAPIST_ENDPOINT, json=build_therapist_payload())
        response = self.client.patch(TherapistRouter.THERAPIST_ENDPOINT,
                                     params={"walletAddress": FAKE_WALLET_ADDRESS},
                                     json={"yearsOfExperience": 10, "consultationFeeETH": 0.05})
        assert response.status_code == 200

        body = response.json()
        assert body["message"] == "Therapist data updated successfully"
        assert body["therapistData"]["yearsOfExperience"] == 10
        assert body["therapistData"]["consultationFeeETH"] == 0.05
        assert body["therapistData"]["fullName"] == "Dr. Meera Iyer"

    def test_update_therapist_with_null_required_field(self):
        self.client.post(TherapistRouter.THERAPIST_ENDPOINT, json=build_therapist_payload())
        response = self.client.patch(TherapistRouter.THERAPIST_ENDPOINT,
                                     params={"walletAddress": FAKE_WALLET_ADDRESS},
                                     json={"fullName": None})
        assert response.status_code == 400

        stored = self.client.get(TherapistRouter.THERAPIST_ENDPOINT,
                                 params={"walletAddress": FAKE_WALLET_ADDRESS}).json()
        assert stored["fullName"] == "Dr. Meera Iyer"

    def test_update_therapist_with_null_and_blank_fields_leaves_profile_unchanged(self):
        self.client.post(TherapistRouter.THERAPIST_ENDPOINT, json=build_therapist_payload())
        response = self.client.patch(TherapistRouter.THERAPIST_ENDPOINT,
                                     params={"walletAddress": FAKE_WALLET_ADDRESS},
                                     json={"specialties": None, "licenseNumber": ""})
        assert response.status_code == 400

        stored = self.client.get(TherapistRouter.THERAPIST_ENDPOINT,
                                 params={"walletAddress": FAKE_WALLET_ADDRESS}).json()
        assert stored["specialties"] == ["Anxiety", "Depression"]
        assert stored["licenseNumber"] == "RCI-2231-A"

    def test_update_therapist_can_clear_optional_field(self):
        self.client.post(TherapistRouter.THERAPIST_ENDPOINT, json=build_therapist_payload())
        response = self.client.patch(TherapistRouter.THERAPIST_ENDPOINT,
                                     params={"walletAddress": FAKE_WALLET_ADDRESS},
                                     json={"issuingAuthority": None})
        assert response.status_code == 200
        assert response.json()["therapistData"]["issuingAuthority"] is None

    def test_delete_therapist_not_found(self):
        response = self.client.delete(TherapistRouter.THERAPIST_ENDPOINT,
                                      params={"walletAddress": FAKE_UNKNOWN_WALLET_ADDRESS})
        assert response.status_code == 404

    def test_delete_therapist_success(self):
        self.client.post(TherapistRouter.THERAPIST_ENDPOINT, json=build_therapist_payload())
        response = self.client.delete(TherapistRouter.THERAPIST_ENDPOINT,
                                      params={"walletAddress": FAKE_WALLET_ADDRESS})
        assert response.status_code == 200
        assert response.json() == {"message": "Therapist data deleted successfully"}

        get_response = self.client.get(TherapistRouter.THERAPIST_ENDPOINT,
                                       params={"walletAddress": FAKE_WALLET_ADDRESS})
        assert get_response.status_code == 404
