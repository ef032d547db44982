"""Terminal rendering: ANSI helpers, frame composition, and help text.

Import ``hueshift.render.screen`` directly for frame building; this package
module stays import-light so line formatting can use the ANSI helpers.
"""
