"""
Oxy HTML Converter - HTML/CSS/JS to page-builder element trees.

- converter: the conversion core (usable without the HTTP layer)
- main: FastAPI application exposing /convert endpoints

Usage:
    from oxy_converter.converter import HtmlConverter

    result = HtmlConverter().convert("<div><h1>Hello</h1></div>")
"""

__version__ = "1.0.0"
