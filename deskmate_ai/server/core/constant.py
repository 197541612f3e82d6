PROJECT_NAME = "DeskMate-AI"
API_V1_STR = "/api/v1"
