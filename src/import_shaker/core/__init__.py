"""
Core Package.

Contains the transformation backend:
- Binding Registry
- Resolution Policy data model
- Import Synthesizer
- Tree Shaker pass and its mixins
- Engine
"""
