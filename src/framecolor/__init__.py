"""framecolor -- Interactive frame server with a button-driven background color.

Serves an HTML frame page that embeds a generated JPEG. Frame button
callbacks pick a color from a fixed palette, and every later image render
is filled with that color.
"""

__version__ = "0.1.0"
