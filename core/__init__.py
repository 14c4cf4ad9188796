"""Survey building, answering and analysis pages."""
