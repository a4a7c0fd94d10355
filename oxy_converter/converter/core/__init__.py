"""
Core - Conversion orchestration.

- converter: HtmlConverter facade
- tree_builder: DOM walk and tree assembly
- selector_matcher: stylesheet rule matching
- residual_css: stylesheet text left after conversion
- js_transformer: inline script rewriting

Import from the submodules; HtmlConverter is re-exported by
``oxy_converter.converter``.
"""
