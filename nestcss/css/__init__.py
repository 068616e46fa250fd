"""
References:
    - [basics](https://developer.mozilla.org/en-US/docs/Learn/CSS/First_steps/How_CSS_is_structured)
    - [nesting](https://developer.chrome.com/articles/css-nesting/)
    - [selectors](https://developer.mozilla.org/en-US/docs/Web/CSS/CSS_Selectors)

<comment/>
<rule>
    <selector/>, <selector/> {
        <property/>: <value/>;
        <rule/>
    }
</rule>

selector => tag, `*`, `.class`, `#id`, descendant (space) and child (`>`) combinators,
value    => keyword, number, number+unit, percentage, `#color`, `"string"`, `name(args)`,
            space separated and comma separated lists of those,
"""

from nestcss.css.lexer import Lexer, ParseError
from nestcss.css.parser import Parse, Parser
from nestcss.css.nodes import Comment, Entry, Rule, Selector, StyleSheet
from nestcss.css import values

__all__ = [
    "Lexer",
    "ParseError",
    "Parse",
    "Parser",
    "Comment",
    "Entry",
    "Rule",
    "Selector",
    "StyleSheet",
    "values",
]
