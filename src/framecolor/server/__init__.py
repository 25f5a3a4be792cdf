"""HTTP server module for framecolor.

Serves the frame page at ``/`` and the generated color image at
``/image``. Frame button callbacks posted to ``/`` update the color
store read by the image route.
"""
