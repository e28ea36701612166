import re
from typing import List, Optional
from urllib.parse import urlsplit

from pagescan.checks._common import _finding, aggregated, describe
from pagescan.models.schemas import Finding
from pagescan.models.taxonomy import Category
from pagescan.snapshot.base import Snapshot

HSTS_MIN_AGE = 15552000  # 180d

SUBRESOURCES = [
    ("script[src]", "src"), ("img[src]", "src"), ("iframe[src]", "src"), ("source[src]", "src"),
    ("audio[src]", "src"), ("video[src]", "src"), ("embed[src]", "src"),
    ('link[rel~="stylesheet"][href]', "href"),
]
# anti-forgery names, or a bare "token"/"_token" field as Laravel and similar frameworks emit
CSRF_FIELD = re.compile(r"csrf|xsrf|authenticity|requestverificationtoken|^_?token$", re.I)
ANTI_FORGERY = re.compile(r"csrf|xsrf|authenticity", re.I)
SECRET_NAME = re.compile(r"api[_-]?key|secret|passw(or)?d|access[_-]?token|private[_-]?key", re.I)
SECRET_VALUE_PATTERNS = [
    re.compile(r"AKIA[0-9A-Z]{16}"),                      # AWS access key id
    re.compile(r"sk_live_[0-9a-zA-Z]{16,}"),              # Stripe live secret
    re.compile(r"AIza[0-9A-Za-z\-_]{35}"),                # Google API key
    re.compile(r"-----BEGIN (RSA |EC )?PRIVATE KEY-----"),
]
_WILDCARD_SRC = re.compile(r"(^|;)\s*(default|script)-src\b[^;]*\s\*(\s|;|$)", re.I)


def _scheme(url: str) -> str:
    return urlsplit(url).scheme.lower()


class SecurityCheck:
    key = "security"
    title = "Client-side Security"
    category = Category.SECURITY

    def _csp(self, snapshot: Snapshot) -> Optional[str]:
        header = snapshot.response_header("content-security-policy")
        if header:
            return header.strip()
        for meta in snapshot.query('meta[http-equiv="Content-Security-Policy" i]'):
            content = (meta.attribute("content") or "").strip()
            if content:
                return " ".join(content.split())
        return None

    def _headers(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category
        csp = self._csp(snapshot)
        if not csp:
            out.append(_finding("SEC-NO-CSP", cat, "no-csp", "No Content-Security-Policy",
                                evidence={"observed": "(absent)"}))
        elif _WILDCARD_SRC.search(csp):
            out.append(_finding("SEC-CSP-WILDCARD", cat, "csp-wildcard",
                                "Content-Security-Policy allows any script source",
                                evidence={"observed": csp}))

        # HSTS only means something on an https response we actually saw
        if _scheme(snapshot.location) == "https" and snapshot.response_header("content-type") is not None:
            hsts = snapshot.response_header("strict-transport-security")
            max_age = 0
            for part in (hsts or "").split(";"):
                p = part.strip().lower()
                if p.startswith("max-age="):
                    try:
                        max_age = int(p.split("=", 1)[1])
                    except ValueError:
                        max_age = 0
            if not hsts:
                out.append(_finding("SEC-NO-HSTS", cat, "no-hsts", "Strict-Transport-Security header missing",
                                    evidence={"observed": "(absent)"}))
            elif max_age < HSTS_MIN_AGE:
                out.append(_finding("SEC-NO-HSTS", cat, "no-hsts", "Strict-Transport-Security max-age below 180 days",
                                    evidence={"observed": hsts}))
        return out

    def _resources(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category
        page_scheme = _scheme(snapshot.location)
        page_host = urlsplit(snapshot.location).netloc.lower()

        if page_scheme != "http":
            insecure = [el for selector, attr in SUBRESOURCES for el in snapshot.query(selector)
                        if (el.attribute(attr) or "").strip().lower().startswith("http://")]
            if insecure:
                out.append(aggregated("SEC-MIXED-CONTENT", cat, "mixed-content",
                                      f"{len(insecure)} sub-resources loaded over plain HTTP", insecure))

        unpinned = []
        for script in snapshot.query("script[src]"):
            parts = urlsplit((script.attribute("src") or "").strip())
            external = parts.scheme in ("http", "https") or (parts.netloc and not parts.scheme)
            if external and parts.netloc.lower() != page_host and not script.attribute("integrity"):
                unpinned.append(script)
        if unpinned:
            out.append(aggregated("SEC-NO-SRI", cat, "no-sri",
                                  f"{len(unpinned)} cross-origin scripts without integrity", unpinned))

        blank = [a for a in snapshot.query('a[target="_blank" i][href]')
                 if not {"noopener", "noreferrer"} & set((a.attribute("rel") or "").lower().split())]
        if blank:
            out.append(aggregated("SEC-TARGET-BLANK", cat, "target-blank",
                                  f'{len(blank)} links open a new tab without rel="noopener"', blank))
        return out

    def _markup(self, snapshot: Snapshot) -> List[Finding]:
        out: List[Finding] = []
        cat = self.category

        handlers = [el for el in snapshot.query("*")
                    if any(name.lower().startswith("on") for name in el.attribute_names())]
        if handlers:
            out.append(aggregated("SEC-INLINE-HANDLER", cat, "inline-handler",
                                  f"{len(handlers)} elements use inline event handlers", handlers))

        js_urls = [el for el in snapshot.query("a[href], iframe[src], form[action]")
                   if any((el.attribute(a) or "").strip().lower().startswith("javascript:")
                          for a in ("href", "src", "action"))]
        if js_urls:
            out.append(aggregated("SEC-JS-URL", cat, "javascript-url",
                                  f"{len(js_urls)} javascript: URLs", js_urls))

        for form in snapshot.query("form"):
            action = (form.attribute("action") or "").strip().lower()
            if action.startswith("http://"):
                out.append(_finding("SEC-INSECURE-FORM", cat, "insecure-form", "Form submits over plain HTTP",
                                    location_hint=describe(form), evidence={"action": form.attribute("action")}))
            if (form.attribute("method") or "get").strip().lower() == "post":
                tokens = [i for i in form.query('input[type="hidden" i][name]')
                          if CSRF_FIELD.search(i.attribute("name") or "")]
                if not tokens:
                    out.append(_finding("SEC-NO-CSRF", cat, "no-csrf", "POST form without a CSRF token field",
                                        location_hint=describe(form)))

        for el in snapshot.query('input[type="hidden" i][name], meta[name][content]'):
            name = el.attribute("name") or ""
            value = (el.attribute("value") if el.tag_name == "input" else el.attribute("content")) or ""
            if value.strip() and SECRET_NAME.search(name) and not ANTI_FORGERY.search(name):
                out.append(_finding("SEC-EXPOSED-SECRET", cat, "exposed-secret",
                                    f'Secret-looking value in "{name}"',
                                    location_hint=f"{el.tag_name.upper()}[name={name}]"))

        for script in snapshot.query("script:not([src])"):
            body = script.text()
            for pattern in SECRET_VALUE_PATTERNS:
                if pattern.search(body):
                    out.append(_finding("SEC-EXPOSED-SECRET", cat, "exposed-secret",
                                        "Credential pattern found in inline script",
                                        location_hint="SCRIPT", evidence={"pattern": pattern.pattern}))
                    break
        return out

    def run(self, snapshot: Snapshot) -> List[Finding]:
        return self._headers(snapshot) + self._resources(snapshot) + self._markup(snapshot)
