from enum import Enum
from typing import Dict, NamedTuple, Optional


class Severity(str, Enum):
    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self.value]

    # str's lexicographic ordering would put "minor" above "critical"
    def __lt__(self, other):
        if isinstance(other, Severity):
            return self.rank < other.rank
        return NotImplemented

    def __le__(self, other):
        if isinstance(other, Severity):
            return self.rank <= other.rank
        return NotImplemented

    def __gt__(self, other):
        if isinstance(other, Severity):
            return self.rank > other.rank
        return NotImplemented

    def __ge__(self, other):
        if isinstance(other, Severity):
            return self.rank >= other.rank
        return NotImplemented


_SEVERITY_RANK = {"minor": 0, "moderate": 1, "serious": 2, "critical": 3}


class Category(str, Enum):
    STRUCTURE = "structure"
    KEYBOARD = "keyboard"
    CONTRAST = "contrast"
    IMAGES = "images"
    FORMS = "forms"
    FOCUS = "focus"
    ARIA = "aria"
    TEXT = "text"
    INTERACTIVE = "interactive"
    SCREEN_READER = "screen-reader"
    MOBILE = "mobile"
    MEDIA = "media"
    SECURITY = "security"
    PERFORMANCE = "performance"


class Rule(NamedTuple):
    name: str
    level: Optional[str]   # WCAG conformance level; None for non-WCAG tags
    severity: Severity


SCAN_ERROR = "SCAN_ERROR"
CHECK_ERROR = "CHECK_ERROR"

DEFAULT_SEVERITY = Severity.MODERATE
DEFAULT_REMEDY = "Review the reported element and fix the underlying issue."

RULES: Dict[str, Rule] = {
    # WCAG 2.1
    "1.1.1": Rule("Non-text Content", "A", Severity.SERIOUS),
    "1.2.1": Rule("Audio-only and Video-only (Prerecorded)", "A", Severity.MODERATE),
    "1.2.2": Rule("Captions (Prerecorded)", "A", Severity.MODERATE),
    "1.3.1": Rule("Info and Relationships", "A", Severity.SERIOUS),
    "1.3.2": Rule("Meaningful Sequence", "A", Severity.SERIOUS),
    "1.4.1": Rule("Use of Color", "A", Severity.SERIOUS),
    "1.4.2": Rule("Audio Control", "A", Severity.SERIOUS),
    "1.4.3": Rule("Contrast (Minimum)", "AA", Severity.SERIOUS),
    "1.4.4": Rule("Resize Text", "AA", Severity.SERIOUS),
    "1.4.8": Rule("Visual Presentation", "AAA", Severity.MINOR),
    "1.4.10": Rule("Reflow", "AA", Severity.MODERATE),
    "1.4.11": Rule("Non-text Contrast", "AA", Severity.MODERATE),
    "1.4.12": Rule("Text Spacing", "AA", Severity.MODERATE),
    "1.4.13": Rule("Content on Hover or Focus", "AA", Severity.MODERATE),
    "2.1.1": Rule("Keyboard", "A", Severity.SERIOUS),
    "2.1.2": Rule("No Keyboard Trap", "A", Severity.CRITICAL),
    "2.1.4": Rule("Character Key Shortcuts", "A", Severity.SERIOUS),
    "2.2.2": Rule("Pause, Stop, Hide", "A", Severity.SERIOUS),
    "2.4.1": Rule("Bypass Blocks", "A", Severity.SERIOUS),
    "2.4.2": Rule("Page Titled", "A", Severity.SERIOUS),
    "2.4.3": Rule("Focus Order", "A", Severity.SERIOUS),
    "2.4.4": Rule("Link Purpose (In Context)", "A", Severity.SERIOUS),
    "2.4.6": Rule("Headings and Labels", "AA", Severity.MODERATE),
    "2.4.7": Rule("Focus Visible", "AA", Severity.SERIOUS),
    "2.5.5": Rule("Target Size", "AAA", Severity.MODERATE),
    "2.5.8": Rule("Target Size (Minimum)", "AA", Severity.MODERATE),
    "3.1.1": Rule("Language of Page", "A", Severity.SERIOUS),
    "3.2.1": Rule("On Focus", "A", Severity.SERIOUS),
    "3.2.2": Rule("On Input", "A", Severity.SERIOUS),
    "3.3.1": Rule("Error Identification", "A", Severity.SERIOUS),
    "3.3.2": Rule("Labels or Instructions", "A", Severity.SERIOUS),
    "4.1.1": Rule("Parsing", "A", Severity.MODERATE),
    "4.1.2": Rule("Name, Role, Value", "A", Severity.SERIOUS),
    "4.1.3": Rule("Status Messages", "AA", Severity.MODERATE),
    # security
    "SEC-NO-CSP": Rule("Content-Security-Policy missing", None, Severity.MODERATE),
    "SEC-CSP-WILDCARD": Rule("Content-Security-Policy uses wildcards", None, Severity.MINOR),
    "SEC-NO-HSTS": Rule("Strict-Transport-Security missing", None, Severity.MINOR),
    "SEC-MIXED-CONTENT": Rule("Insecure sub-resource", None, Severity.SERIOUS),
    "SEC-NO-SRI": Rule("Cross-origin script without integrity", None, Severity.MODERATE),
    "SEC-TARGET-BLANK": Rule("target=_blank without noopener", None, Severity.MINOR),
    "SEC-INLINE-HANDLER": Rule("Inline event handler", None, Severity.MODERATE),
    "SEC-JS-URL": Rule("javascript: URL", None, Severity.MODERATE),
    "SEC-INSECURE-FORM": Rule("Form submits over HTTP", None, Severity.CRITICAL),
    "SEC-NO-CSRF": Rule("POST form without CSRF token", None, Severity.MODERATE),
    "SEC-EXPOSED-SECRET": Rule("Secret-looking value in markup", None, Severity.CRITICAL),
    # performance
    "PERF-DOM-SIZE": Rule("Excessive DOM size", None, Severity.MODERATE),
    "PERF-RENDER-BLOCKING": Rule("Render-blocking scripts", None, Severity.MODERATE),
    "PERF-IMG-DIMENSIONS": Rule("Images without dimensions", None, Severity.MINOR),
    "PERF-INLINE-SCRIPT": Rule("Oversized inline scripts", None, Severity.MINOR),
    "PERF-LOAD-TIME": Rule("Slow page load", None, Severity.MODERATE),
    "PERF-JS-ERRORS": Rule("Script errors during load", None, Severity.MODERATE),
    # synthetic
    SCAN_ERROR: Rule("Page could not be scanned", None, Severity.CRITICAL),
    CHECK_ERROR: Rule("Check failed to run", None, Severity.MODERATE),
}

SEVERITY_BY_RULE: Dict[str, Severity] = {rule_id: rule.severity for rule_id, rule in RULES.items()}


def classify_severity(rule_id: str) -> Severity:
    """Severity tier for a rule id; unknown ids fall back to DEFAULT_SEVERITY."""
    return SEVERITY_BY_RULE.get(rule_id, DEFAULT_SEVERITY)


REMEDIES: Dict[str, str] = {
    # structure
    "missing-title": "Add a descriptive <title> to the page.",
    "missing-lang": "Add a lang attribute to the <html> element.",
    "no-h1": "Add a single H1 heading describing the page.",
    "multiple-h1": "Keep one H1 per page and demote the others.",
    "heading-skip": "Use heading levels in order without skipping.",
    "empty-heading": "Give every heading visible text or remove it.",
    "no-landmarks": "Wrap page regions in landmarks (main, nav, header, footer).",
    "no-skip-link": 'Add a "skip to main content" link as the first focusable element.',
    # keyboard
    "positive-tabindex": 'Use tabindex="0" or rely on natural document order.',
    "hidden-focusable": 'Add tabindex="-1" to hidden interactive elements.',
    "mouse-only-handler": 'Use a native button or add role="button", tabindex="0" and key handlers.',
    # contrast
    "low-contrast": "Increase color contrast to meet WCAG AA ratios.",
    # images
    "missing-alt": "Add an alt attribute with descriptive text.",
    "redundant-alt": 'Remove redundant words like "image" from alt text.',
    "filename-alt": "Replace the file name with a description of the image.",
    "bg-image-no-alt": "Add aria-label (and a role) to background images that convey meaning.",
    # forms
    "missing-label": "Add a label element or aria-label to the control.",
    "placeholder-only": "Use a label element instead of relying on the placeholder.",
    "missing-fieldset": "Group related controls in a fieldset with a legend.",
    "required-not-indicated": 'Add aria-required="true" and a visible required marker.',
    # focus
    "no-focus-indicator": "Add a visible :focus style (outline or box-shadow).",
    "skip-link-not-first": "Move the skip link to the start of the document.",
    # aria
    "empty-aria-label": "Provide meaningful aria-label text or remove the attribute.",
    "invalid-aria-reference": "Ensure referenced ids exist in the document.",
    "invalid-role": "Use a valid WAI-ARIA role value.",
    "missing-aria-level": "Add aria-level to elements with role=heading.",
    "aria-hidden-focusable": 'Remove aria-hidden or make the element unfocusable with tabindex="-1".',
    # text
    "small-text": "Increase font size to at least 12px.",
    "insufficient-line-height": "Set line-height to at least 1.2 times the font size.",
    "justified-text": "Use left-aligned text instead of justified.",
    "low-opacity-text": "Increase text opacity for better readability.",
    # interactive
    "small-touch-target": "Increase the target size to at least 44x44 pixels.",
    "button-no-name": "Add descriptive text or aria-label to the button.",
    "link-no-name": "Add descriptive link text or aria-label.",
    "vague-link-text": "Use link text that explains the destination.",
    # screen reader
    "no-sr-helpers": "Add screen reader helper text and skip links.",
    "table-no-caption": "Add a caption element describing the table.",
    "table-no-headers": "Use th elements for table headers.",
    "improper-list-markup": "Use ul/ol and li elements for lists.",
    # mobile
    "horizontal-scroll": "Use responsive layout to prevent horizontal scrolling.",
    "zoom-disabled": "Remove user-scalable=no and maximum-scale limits from the viewport meta tag.",
    "touch-targets-close": "Increase spacing between touch targets to at least 8px.",
    # media
    "video-no-controls": "Add the controls attribute to the video element.",
    "video-no-captions": "Add a track element with captions.",
    "video-autoplay": "Remove autoplay or provide a pause control.",
    "audio-no-controls": "Add the controls attribute to the audio element.",
    "audio-autoplay": "Remove autoplay from audio elements.",
    # security
    "no-csp": "Add a Content-Security-Policy header or meta tag with a strict default-src.",
    "csp-wildcard": "Replace CSP wildcards with 'self', explicit hosts, nonces or hashes.",
    "no-hsts": "Send Strict-Transport-Security: max-age=31536000; includeSubDomains.",
    "mixed-content": "Load every sub-resource over HTTPS.",
    "no-sri": 'Add integrity and crossorigin="anonymous" to cross-origin scripts.',
    "target-blank": 'Add rel="noopener noreferrer" to links opening a new tab.',
    "inline-handler": "Move inline event handlers into scripts using addEventListener.",
    "javascript-url": "Replace javascript: URLs with real links or buttons.",
    "insecure-form": "Submit forms over HTTPS only.",
    "no-csrf": "Include a per-session CSRF token in state-changing forms.",
    "exposed-secret": "Remove secrets from client-side markup and rotate them.",
    # performance
    "dom-size": "Reduce DOM size by simplifying markup or virtualising long lists.",
    "render-blocking": "Add defer or async to scripts in <head>.",
    "img-dimensions": "Set width and height on images to avoid layout shift.",
    "inline-script-size": "Move large inline scripts into cacheable external files.",
    "load-time": "Cut blocking requests and payload size until the page settles within the load budget.",
    "js-errors": "Fix the uncaught script errors raised while the page loads.",
    # synthetic
    "scan-error": "Fix page loading issues before assessing the page.",
    "check-error": "Re-run the scan; report the check failure if it persists.",
}


def remedy_for(issue_type: str) -> str:
    return REMEDIES.get(issue_type, DEFAULT_REMEDY)
