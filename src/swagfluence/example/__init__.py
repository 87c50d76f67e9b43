"""Example payload synthesis for schemas.

See :class:`~swagfluence.example.synthesizer.ExampleSynthesizer`.
"""

from swagfluence.example.synthesizer import (
    ExampleSynthesizer,
    generate_example_json,
    string_example,
)

__all__ = ["ExampleSynthesizer", "generate_example_json", "string_example"]
