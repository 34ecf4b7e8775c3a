"""Files API client and upload encoding."""
