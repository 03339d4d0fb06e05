from enum import Enum

# Collection names
AVAILABILITIES_COLLECTION_NAME = "availabilities"
CHAT_HISTORIES_COLLECTION_NAME = "chat_histories"
PERSONALITY_RESULTS_COLLECTION_NAME = "personality_results"
THERAPISTS_COLLECTION_NAME = "therapists"

# Unique keys per collection
UNIQUE_KEYS = {
    AVAILABILITIES_COLLECTION_NAME: ["therapistId", "date"],
    CHAT_HISTORIES_COLLECTION_NAME: ["walletAddress"],
    PERSONALITY_RESULTS_COLLECTION_NAME: ["walletAddress"],
    THERAPISTS_COLLECTION_NAME: ["walletAddress"],
}

# Environments
TESTING_ENVIRONMENT = "testing"
DEV_ENVIRONMENT = "dev"
STAGING_ENVIRONMENT = "staging"
PROD_ENVIRONMENT = "prod"

# General constants
WALLET_ADDRESS_KEY = "walletAddress"
CHAT_HISTORY_CAP = 50
CHAT_PROMPT_HISTORY_WINDOW = 6

class ChatRole(Enum):
    USER = "user"
    ASSISTANT = "assistant"

class ResponseLanguage(Enum):
    ENGLISH = "en"
    HINDI = "hi"
