"""Survey data model: surveys, sections, questions, responses and answers."""
