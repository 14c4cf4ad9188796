"""Django project package for Survey Insights."""
