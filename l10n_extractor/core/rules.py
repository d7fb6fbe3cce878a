"""Heuristic rule tables shared by the literal filter and the classifier.

Every table is an ordered list of ``Rule`` entries; the first rule whose
predicate matches decides the outcome. Keyword and pattern sets are
defined once here so both consumers read the same data.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional

from .models import StringRole


@dataclass(frozen=True)
class Rule:
    """A named predicate and the outcome it produces when it matches."""
    name: str
    predicate: Callable[[Any], bool]
    outcome: Any


def first_match(rules: Iterable[Rule], subject: Any) -> Optional[Rule]:
    """Return the first rule whose predicate accepts ``subject``."""
    for rule in rules:
        if rule.predicate(subject):
            return rule
    return None


def _compile_all(patterns: Iterable[str], flags: int = 0) -> List[re.Pattern]:
    return [re.compile(p, flags) for p in patterns]


def _keyword_pattern(keywords: Iterable[str]) -> re.Pattern:
    """Whole-word, case-insensitive alternation over keywords and phrases."""
    alternation = '|'.join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))
    return re.compile(rf'(?<!\w)(?:{alternation})(?!\w)', re.IGNORECASE)


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

BUTTON_KEYWORDS = (
    'click', 'tap', 'press', 'submit', 'save', 'cancel', 'continue', 'next',
    'back', 'finish', 'done', 'close', 'open', 'login', 'logout', 'log in',
    'log out', 'sign in', 'sign up', 'sign out', 'register', 'delete', 'edit',
    'update', 'create', 'add', 'remove', 'send', 'share', 'retry', 'try again',
    'skip', 'apply', 'accept', 'decline', 'upload', 'download', 'refresh',
)

# Whole-value answers; inside longer text "no" or "ok" says nothing about the role.
BUTTON_EXACT = frozenset({'ok', 'okay', 'yes', 'no', 'got it'})

ERROR_KEYWORDS = (
    'error', 'failed', 'failure', 'invalid', 'wrong', 'incorrect', 'missing',
    'required', 'not found', 'unauthorized', 'forbidden', 'timeout',
    'timed out', 'unable', 'cannot', "can't", 'could not', 'denied',
    'expired', 'oops', 'no internet',
)

HINT_KEYWORDS = (
    'enter', 'type', 'input', 'search', 'hint', 'placeholder', 'example',
    'e.g.', 'optional', 'choose', 'select', 'pick',
)

TITLE_KEYWORDS = (
    'title', 'heading', 'header', 'welcome', 'dashboard', 'settings',
    'profile', 'account', 'home', 'about', 'help', 'contact', 'overview',
)

LABEL_KEYWORDS = (
    'name', 'username', 'email', 'e-mail', 'password', 'address', 'phone',
    'age', 'date', 'time', 'amount', 'quantity', 'price', 'total',
)

CONFIRMATION_KEYWORDS = (
    'are you sure', 'confirm', 'confirmation', 'verify', 'do you want',
    'would you like', 'please confirm',
)

# Single words that look like identifiers but are UI text when capitalized.
COMMON_UI_WORDS = frozenset(
    [k for k in BUTTON_KEYWORDS if ' ' not in k]
    + list(BUTTON_EXACT)
    + ['search', 'settings', 'home', 'profile', 'help', 'about', 'menu',
       'more', 'filter', 'sort', 'view', 'new', 'faq']
)

DEBUG_CALL_PATTERN = re.compile(
    r'(?<![\w$.])(?:print|debugPrint|log|assert|debugger)\s*\('
    r'|(?<![\w$])developer\s*\.\s*log\s*\('
    r'|(?<![\w$])_?(?:logger|log|console)\s*\.\s*[A-Za-z]+\s*\('
    r'|(?<![\w$])throw\s'
    r'|(?<![\w$])(?:[A-Z]\w*)?(?:Exception|Error)\s*\('
)

DEBUG_VALUE_PATTERN = re.compile(
    r'^\s*(?:DEBUG|LOG|TRACE|ERROR|WARNING|WARN|INFO)\s*:'
    r'|\[(?:DEBUG|LOG|TRACE)\]'
)

IDENTIFIER_PATTERNS = _compile_all([
    r'^[a-z][a-zA-Z0-9_]*$',                          # camelCase, snake_case, lowercase token
    r'^_[a-zA-Z0-9_]+$',                              # private identifier
    r'^[A-Z][A-Z0-9_]*$',                             # ALL_CAPS constant
    r'^[A-Z][a-z0-9]+(?:[A-Z][a-z0-9]*)+$',           # PascalCase type name
    r'^[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)+$',             # dotted identifier
    r'^[a-z0-9]+(?:-[a-z0-9]+)+$',                    # kebab-case
    r'^(?:0x)?[0-9a-fA-F]{8,}$',                      # hex token
    r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$',
    r'^(?=[A-Za-z0-9+/]*[0-9+/])[A-Za-z0-9+/]{16,}={0,2}$',  # base64
])

URL_PATH_PATTERNS = _compile_all([
    r'^[a-zA-Z][a-zA-Z0-9+.\-]*://',
    r'^(?:mailto|tel|sms|package|dart|file|data|asset):',
    r'^(?:/|\./|\.\./|~/)',
    r'^[A-Za-z]:[\\/]',
    r'^(?:assets|images|img|icons|fonts|sounds|audio|videos|lib|packages|res|raw)/',
    r'\.(?:png|jpe?g|gif|svg|webp|ico|bmp|mp3|wav|ogg|m4a|aac|mp4|avi|mov|wmv|flv|webm'
    r'|ttf|otf|woff2?|json|xml|ya?ml|arb|dart|html?|css|js|txt|pdf|csv|zip)$',
    r'^[\w.+\-]+@[\w\-]+(?:\.[\w\-]+)+$',
    r'^(?:www\.)?[\w\-]+(?:\.[\w\-]+)*\.(?:com|org|net|io|dev|app|co|edu|gov)(?:/\S*)?$',
], re.IGNORECASE)

# REST endpoint shapes, matched case-sensitively
API_ENDPOINT_PATTERNS = _compile_all([
    r'/[a-z]+/[a-z]+$',                               # .../users/profile
    r'^\S*\{[a-zA-Z_]+\}\S*$',                        # users/{id}
])

DATE_FORMAT_LETTERS = 'yMLdEHhmsSaKkzZQGwu'
_DATE_FORMAT_SHAPE = re.compile(rf"^(?:([{DATE_FORMAT_LETTERS}])\1*|[\s,.:/\-'])+$")
_DATE_FORMAT_RUN = re.compile(rf'([{DATE_FORMAT_LETTERS}])\1*')
_DATE_FORMAT_SEPARATOR = re.compile(r"[\s,.:/\-']")

COLOR_PATTERNS = _compile_all([
    r'^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$',
    r'^0x[0-9a-fA-F]{6,8}$',
    r'^(?:rgba?|hsla?)\(',
])

COLOR_NAMES = frozenset({
    'red', 'green', 'blue', 'yellow', 'orange', 'purple', 'pink', 'black',
    'white', 'grey', 'gray', 'brown', 'cyan', 'magenta', 'teal', 'indigo',
    'amber', 'lime', 'transparent',
})

MEASUREMENT_PATTERN = re.compile(
    r'^-?\d+(?:\.\d+)?\s*(?:px|dp|sp|pt|em|rem|%|vh|vw|cm|mm|in|ms|s|kb|mb|gb)$',
    re.IGNORECASE
)

CONFIG_VALUES = frozenset({
    'true', 'false', 'null', 'nil', 'none', 'undefined', 'production',
    'development', 'staging', 'test', 'debug', 'release',
    'android', 'ios', 'web', 'windows', 'macos', 'linux', 'fuchsia',
})


# ---------------------------------------------------------------------------
# Literal filter rules
# ---------------------------------------------------------------------------

class Candidate(NamedTuple):
    """Everything the filter rules look at for one literal."""
    value: str
    text: str
    surrounding: str
    already_localized: bool
    min_length: int
    max_length: int


def is_debug_context(candidate: Candidate) -> bool:
    if DEBUG_VALUE_PATTERN.search(candidate.text):
        return True
    return bool(DEBUG_CALL_PATTERN.search(candidate.surrounding))


def is_technical_identifier(candidate: Candidate) -> bool:
    text = candidate.text
    if text.lower() in COMMON_UI_WORDS and not text.islower():
        return False
    return any(p.match(text) for p in IDENTIFIER_PATTERNS)


def is_url_or_path(candidate: Candidate) -> bool:
    text = candidate.text
    return (any(p.search(text) for p in URL_PATH_PATTERNS)
            or any(p.search(text) for p in API_ENDPOINT_PATTERNS))


def is_date_format(candidate: Candidate) -> bool:
    """
    Match intl-style format templates such as ``dd/MM/yyyy`` or ``h:mm a``.

    Each letter run must repeat a single format letter. Without separators
    only a single run qualifies (``yyyy``, ``EEEE``), so words like "Mass"
    are not mistaken for formats.
    """
    text = candidate.text
    if not _DATE_FORMAT_SHAPE.match(text):
        return False
    runs = [m.group(0) for m in _DATE_FORMAT_RUN.finditer(text)]
    if not any(len(run) >= 2 for run in runs):
        return False
    return bool(_DATE_FORMAT_SEPARATOR.search(text)) or len(runs) == 1


def is_color(candidate: Candidate) -> bool:
    if candidate.text in COLOR_NAMES:
        return True
    return any(p.match(candidate.text) for p in COLOR_PATTERNS)


def is_measurement(candidate: Candidate) -> bool:
    return bool(MEASUREMENT_PATTERN.match(candidate.text))


def is_config_value(candidate: Candidate) -> bool:
    return candidate.text.lower() in CONFIG_VALUES


def has_no_letters(candidate: Candidate) -> bool:
    return not any(ch.isalpha() for ch in candidate.text)


FILTER_RULES: List[Rule] = [
    Rule('empty', lambda c: not c.text, 'empty or whitespace'),
    Rule('length', lambda c: not c.min_length <= len(c.text) <= c.max_length, 'length out of range'),
    Rule('already_localized', lambda c: c.already_localized, 'already localized'),
    Rule('debug_context', is_debug_context, 'debug or logging context'),
    Rule('technical_identifier', is_technical_identifier, 'technical identifier'),
    Rule('url_or_path', is_url_or_path, 'url or path'),
    Rule('date_format', is_date_format, 'date format pattern'),
    Rule('color', is_color, 'color value'),
    Rule('measurement', is_measurement, 'measurement'),
    Rule('config_value', is_config_value, 'configuration value'),
    Rule('no_letters', has_no_letters, 'no alphabetic characters'),
]


# ---------------------------------------------------------------------------
# Structural role tables
# ---------------------------------------------------------------------------

# Role tables keyed by lower-cased call name; a None key is the default
# for parameters not listed.
WidgetRoles = Dict[Optional[str], StringRole]

BUTTON_WIDGETS = (
    'elevatedbutton', 'textbutton', 'outlinedbutton', 'filledbutton',
    'iconbutton', 'floatingactionbutton', 'cupertinobutton', 'button',
)
APP_BAR_WIDGETS = ('appbar', 'sliverappbar', 'cupertinonavigationbar')
INPUT_WIDGETS = ('textfield', 'textformfield', 'cupertinotextfield', 'inputdecoration')
DIALOG_WIDGETS = ('alertdialog', 'dialog', 'simpledialog', 'showdialog', 'cupertinoalertdialog')
CHIP_WIDGETS = ('chip', 'actionchip', 'filterchip', 'inputchip', 'choicechip')
NAVIGATION_WIDGETS = ('bottomnavigationbaritem', 'navigationdestination', 'navigationraildestination', 'tab')

# Calls that only render text; their own role is weaker than the widget they sit in.
TEXT_WRAPPER_WIDGETS = frozenset({'text', 'selectabletext', 'richtext', 'textspan'})


def _widgets(names: Iterable[str], roles: WidgetRoles) -> Dict[str, WidgetRoles]:
    return {name: roles for name in names}


WIDGET_ROLE_TABLE: Dict[str, WidgetRoles] = {
    **_widgets(BUTTON_WIDGETS, {None: StringRole.BUTTON}),
    **_widgets(TEXT_WRAPPER_WIDGETS, {None: StringRole.MESSAGE}),
    **_widgets(APP_BAR_WIDGETS, {'title': StringRole.TITLE, None: StringRole.NAVIGATION}),
    **_widgets(INPUT_WIDGETS, {
        'hinttext': StringRole.HINT,
        'labeltext': StringRole.LABEL,
        'helpertext': StringRole.DESCRIPTION,
        'errortext': StringRole.ERROR,
        None: StringRole.PLACEHOLDER,
    }),
    **_widgets(DIALOG_WIDGETS, {
        'title': StringRole.TITLE,
        'content': StringRole.MESSAGE,
        None: StringRole.CONFIRMATION,
    }),
    'snackbar': {None: StringRole.MESSAGE},
    'listtile': {
        'title': StringRole.TITLE,
        'subtitle': StringRole.DESCRIPTION,
        None: StringRole.MESSAGE,
    },
    'card': {None: StringRole.MESSAGE},
    'tooltip': {None: StringRole.DESCRIPTION},
    **_widgets(CHIP_WIDGETS, {None: StringRole.LABEL}),
    **_widgets(NAVIGATION_WIDGETS, {None: StringRole.NAVIGATION}),
}

PARAMETER_ROLE_TABLE: Dict[str, StringRole] = {
    'title': StringRole.TITLE,
    'heading': StringRole.TITLE,
    'header': StringRole.TITLE,
    'content': StringRole.MESSAGE,
    'message': StringRole.MESSAGE,
    'text': StringRole.MESSAGE,
    'data': StringRole.MESSAGE,
    'body': StringRole.MESSAGE,
    'hint': StringRole.HINT,
    'hinttext': StringRole.HINT,
    'placeholder': StringRole.PLACEHOLDER,
    'label': StringRole.LABEL,
    'labeltext': StringRole.LABEL,
    'helper': StringRole.DESCRIPTION,
    'helpertext': StringRole.DESCRIPTION,
    'description': StringRole.DESCRIPTION,
    'subtitle': StringRole.DESCRIPTION,
    'tooltip': StringRole.DESCRIPTION,
    'semanticlabel': StringRole.DESCRIPTION,
    'error': StringRole.ERROR,
    'errortext': StringRole.ERROR,
}


def role_for_widget(structural_type: Optional[str], parameter_name: Optional[str]) -> Optional[StringRole]:
    """Look up the role a call name (and parameter) implies, if known."""
    if not structural_type:
        return None
    roles = WIDGET_ROLE_TABLE.get(structural_type.lower())
    if roles is None:
        return None
    if parameter_name and parameter_name.lower() in roles:
        return roles[parameter_name.lower()]
    return roles.get(None)


def role_for_parameter(parameter_name: Optional[str]) -> Optional[StringRole]:
    if not parameter_name:
        return None
    return PARAMETER_ROLE_TABLE.get(parameter_name.lower())


def is_text_wrapper(structural_type: Optional[str]) -> bool:
    return bool(structural_type) and structural_type.lower() in TEXT_WRAPPER_WIDGETS


# ---------------------------------------------------------------------------
# Lexical role rules
# ---------------------------------------------------------------------------

_CONFIRMATION = _keyword_pattern(CONFIRMATION_KEYWORDS)
_BUTTON = _keyword_pattern(BUTTON_KEYWORDS)
_ERROR = _keyword_pattern(ERROR_KEYWORDS)
_HINT = _keyword_pattern(HINT_KEYWORDS)
_TITLE = _keyword_pattern(TITLE_KEYWORDS)
_LABEL = _keyword_pattern(LABEL_KEYWORDS)

MAX_BUTTON_WORDS = 4


def looks_like_button(text: str) -> bool:
    normalized = text.strip().rstrip('!.').lower()
    if normalized in BUTTON_EXACT:
        return True
    return len(text.split()) <= MAX_BUTTON_WORDS and bool(_BUTTON.search(text))


def looks_like_title(text: str) -> bool:
    """At least two words and 70% of them capitalized."""
    words = text.split()
    if len(words) < 2:
        return False
    capitalized = sum(1 for w in words if w[0].isupper())
    return capitalized / len(words) >= 0.7


def looks_like_label(text: str) -> bool:
    """Short phrase without sentence punctuation."""
    stripped = text.strip()
    if len(stripped) >= 30 or any(ch in stripped for ch in '.!?'):
        return False
    return len(stripped.split()) <= 3


def looks_like_message(text: str) -> bool:
    stripped = text.strip()
    return len(stripped) > 20 or ' ' in stripped


CONTENT_ROLE_RULES: List[Rule] = [
    Rule('confirmation', lambda t: bool(_CONFIRMATION.search(t)), StringRole.CONFIRMATION),
    Rule('button', looks_like_button, StringRole.BUTTON),
    Rule('error', lambda t: bool(_ERROR.search(t)), StringRole.ERROR),
    Rule('hint', lambda t: bool(_HINT.search(t)), StringRole.HINT),
    Rule('title_keyword', lambda t: bool(_TITLE.search(t)), StringRole.TITLE),
    Rule('title_case', looks_like_title, StringRole.TITLE),
    Rule('label_keyword', lambda t: bool(_LABEL.search(t)), StringRole.LABEL),
    Rule('short_label', looks_like_label, StringRole.LABEL),
    Rule('message', looks_like_message, StringRole.MESSAGE),
]


def role_for_text(text: str) -> StringRole:
    """Classify a value by its wording alone."""
    rule = first_match(CONTENT_ROLE_RULES, text)
    return rule.outcome if rule else StringRole.UNKNOWN
