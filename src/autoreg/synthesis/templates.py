from textwrap import dedent

COMPILATION_UNIT_TEMPLATE = dedent(
    """
    {% if auto_generated_header %}
    // <auto-generated/>

    {% endif %}
    {% for namespace_import in usings %}
    using {{ namespace_import }};
    {% endfor %}

    {{ namespace_block }}
    """,
).strip()

NAMESPACE_TEMPLATE = dedent(
    """
    {% if namespace %}
    namespace {{ namespace }}
    {
    {% endif %}
    {% if nullable_context %}
    #nullable enable
    {% endif %}
    {{ type_block }}
    {% if nullable_context %}
    #nullable disable
    {% endif %}
    {% if namespace %}
    }
    {% endif %}
    """,
).strip()

TYPE_TEMPLATE = dedent(
    """
    {{ type_declaration }}
    {
    {{ method_block }}
    }
    """,
).strip()

METHOD_TEMPLATE = dedent(
    """
    {{ method_signature }}
    {
    {{ body_block }}
    }
    """,
).strip()
