from __future__ import annotations

# Standard-vocabulary element names. Anything not listed here is treated as an
# include directive. Matching is case-sensitive.
HTML_ELEMENTS: tuple[str, ...] = (
    "!DOCTYPE",
    "!--",
    "a",
    "abbr",
    "address",
    "area",
    "article",
    "aside",
    "audio",
    "b",
    "base",
    "bdi",
    "bdo",
    "blockquote",
    "body",
    "br",
    "button",
    "canvas",
    "caption",
    "cite",
    "code",
    "col",
    "colgroup",
    "data",
    "datalist",
    "dd",
    "del",
    "details",
    "dfn",
    "dialog",
    "div",
    "dl",
    "dt",
    "em",
    "embed",
    "fieldset",
    "figcaption",
    "figure",
    "footer",
    "form",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "head",
    "header",
    "hgroup",
    "hr",
    "html",
    "i",
    "iframe",
    "img",
    "input",
    "ins",
    "kbd",
    "label",
    "legend",
    "li",
    "link",
    "main",
    "map",
    "mark",
    "math",
    "menu",
    "meta",
    "meter",
    "nav",
    "noscript",
    "object",
    "ol",
    "optgroup",
    "option",
    "output",
    "p",
    "param",
    "picture",
    "pre",
    "progress",
    "q",
    "rp",
    "rt",
    "ruby",
    "s",
    "samp",
    "script",
    "search",
    "section",
    "select",
    "slot",
    "small",
    "source",
    "span",
    "strong",
    "style",
    "sub",
    "summary",
    "sup",
    "svg",
    "table",
    "tbody",
    "td",
    "template",
    "textarea",
    "tfoot",
    "th",
    "thead",
    "time",
    "title",
    "tr",
    "track",
    "u",
    "ul",
    "var",
    "video",
    "wbr",
)

# Prefix of every stored relative path in the tag -> path index.
RELATIVE_MARKER = "./"

# Sibling directory of the input root used when no output dir is given.
OUT_DIRNAME_DEFAULT = "build"

# Picked up from the working directory when --config is not passed.
CONFIG_FILENAME_DEFAULT = "incbuild.yaml"

CONFIG_KEYS: tuple[str, ...] = (
    "in",
    "out",
    "strict",
    "graph",
    "ignore",
    "escalate",
)
