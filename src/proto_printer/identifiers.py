from __future__ import annotations


def de_camel_case(identifier: str) -> str:
    """Convert an identifier like "fieldName" into "field_name".

    The first character is lowercased; every later uppercase letter becomes
    an underscore plus its lowercase form. Names with runs of capitals or a
    leading underscore do not survive a round trip ("ABC" -> "a_b_c").
    """
    out = []
    for i, ch in enumerate(identifier):
        if i == 0:
            out.append(ch.lower())
        elif ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)
