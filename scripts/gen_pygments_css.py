from richtext.core.config import get_settings
from richtext.services.highlighting import stylesheet

css = stylesheet(get_settings().pygments_style)
with open("highlight.css", "w") as f:
    f.write(css)
print("Written highlight.css")
