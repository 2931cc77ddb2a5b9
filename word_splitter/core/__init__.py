"""Core tokenization, measurement, and layout modules.

WHY: The core package holds the algorithm that turns a styled text run into
positioned word units. It knows nothing about files, the CLI, or HTTP; the
document host hands it runs, a rendering host, and an output container.

HOW: ir.py defines the data structures, tokenizer.py cuts text into tokens,
styles.py resolves and copies styles, measure.py wraps the rendering host
with fallbacks, layout.py positions the words, splitter.py drives a whole
selection, and document.py is the JSON document host.

RULES:
- IR dataclasses are the contract — change with care
- Layout never fails on bad measurements; fallbacks guarantee progress
- The output container is always injected, never looked up by the core
"""
