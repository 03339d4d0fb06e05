import logging
import os

from .routers.assistant_router import AssistantRouter
from .routers.availability_router import AvailabilityRouter
from .routers.therapist_router import TherapistRouter
from .service_coordinator import EndpointServiceCoordinator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)

environment = os.environ.get("ENVIRONMENT")

app = EndpointServiceCoordinator(routers=[
                                    AvailabilityRouter().router,
                                    TherapistRouter().router,
                                    AssistantRouter().router,
                                ],
                                 environment=environment).app
