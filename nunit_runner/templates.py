"""Jinja2 templates for the HTML report.

The report is a single Bootstrap 3 page:
- page.html: document shell (assets, inline styles) wrapping everything else
- summary.html: run-level counters and success rate
- fixture.html: one panel per fixture, its printable case list and its modal dialog

Failure messages and stack traces are always passed through ``|e``. Every other
value is inserted as-is unless the environment has autoescaping enabled.
"""

PAGE_TITLE = "Results"

STYLESHEETS = [
    "http://cdn.jsdelivr.net/bootstrap/3.2.0/css/bootstrap.min.css",
    "http://maxcdn.bootstrapcdn.com/bootswatch/3.2.0/superhero/bootstrap.min.css",
]

SCRIPTS = [
    "http://code.jquery.com/jquery-2.1.1.min.js",
    "http://cdn.jsdelivr.net/bootstrap/3.2.0/js/bootstrap.min.js",
]

INLINE_STYLES = [
    ".page { margin: 15px 0; }",
    ".no-bottom-margin { margin-bottom: 0; }",
    ".printed-test-result { margin-top: 15px; }",
    ".reason-text { margin-top: 15px; }",
    ".scroller { overflow: scroll; }",
    "@media print { .panel-collapse { display: block !important; } }",
    ".val { font-size: 38px; font-weight: bold; margin-top: -10px; }",
    ".stat { font-weight: 800; text-transform: uppercase; font-size: 0.85em; color: #BBBBBB; }",
    ".test-result { display: block; }",
    ".no-underline:hover { text-decoration: none; }",
    ".text-default { color: #555; }",
    ".text-default:hover { color: #000; }",
    ".info { color: #DDDDDD; }",
    ".modal-dialog { width: 80%; }",
]

PAGE_TEMPLATE = """\
<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1, maximum-scale=1" />
    <title>{{ title }}</title>
{% for href in stylesheets %}
    <link rel="stylesheet" type="text/css" href="{{ href }}" />
{% endfor %}
{% for src in scripts %}
    <script type="text/javascript" src="{{ src }}"></script>
{% endfor %}
    <script type="text/javascript">
    $(document).ready(function() {
        $('[data-toggle="tooltip"]').tooltip({'placement': 'bottom'});
    });
    </script>
    <style>
{% for rule in styles %}
    {{ rule }}
{% endfor %}
    </style>
  </head>
  <body>
<div class="container-fluid page">
{% include "summary.html" %}
{% for view in fixtures %}
{% include "fixture.html" %}
{% endfor %}
</div>
</div>
  </body>
</html>
"""

SUMMARY_TEMPLATE = """\
<div class="row">
<div class="col-md-12">
<div class="panel panel-info">
<div class="panel-heading">Summary - <small>{{ run.name }}</small></div>
<div class="panel-body">
<div class="col-md-2 col-sm-4 col-xs-6 text-center"><div class="stat">Tests</div><div class="val ignore-val">{{ run.total }}</div></div>
<div class="col-md-2 col-sm-4 col-xs-6 text-center"><div class="stat">Passed</div><div class="val {{ 'text-success' if run.failed > 0 else '' }}">{{ run.passed }}</div></div>
<div class="col-md-2 col-sm-4 col-xs-6 text-center"><div class="stat">Failed</div><div class="val {{ 'text-danger' if run.failed > 0 else '' }}">{{ run.failed }}</div></div>
<div class="col-md-2 col-sm-4 col-xs-6 text-center"><div class="stat">Inconclusive</div><div class="val {{ 'text-danger' if run.inconclusive > 0 else '' }}">{{ run.inconclusive }}</div></div>
<div class="col-md-2 col-sm-4 col-xs-6 text-center"><div class="stat">Skipped</div><div class="val {{ 'text-warning' if run.skipped > 0 else '' }}">{{ run.skipped }}</div></div>
<div class="col-md-2 col-sm-4 col-xs-6 text-center"><div class="stat">Success Rate</div><div class="val">{{ run.success_rate_text }}%</div></div>
</div>
</div>
</div>
"""

FIXTURE_TEMPLATE = """\
{% set fixture = view.fixture %}
{% set modal_id = view.anchor_id %}
<div class="col-md-3">
<div class="panel {{ panel_class(fixture.kind) }}">
<div class="panel-heading">
{{ fixture.name }} - <small>{{ fixture.namespace }}</small><small class="pull-right">{{ fixture.duration_text }}</small>
{% if fixture.reason %}
<span class="glyphicon glyphicon-info-sign pull-right info hidden-print" data-toggle="tooltip" title="{{ fixture.reason }}"></span>
{% endif %}
</div>
<div class="panel-body">
<div class="text-center" style="font-size: 1.5em;">
{% for css, count, icon, label in [
    ('text-success', fixture.passed, 'glyphicon-ok-sign', 'Passed'),
    ('text-warning', fixture.skipped, 'glyphicon-question-sign', 'Ignored'),
    ('text-danger', fixture.failed, 'glyphicon-remove-sign', 'Failed'),
] %}
<div style="float: left; margin: 0px 30px;">
<a href="#{{ modal_id }}" role="button" data-toggle="modal" class="{{ css }} no-underline">
<span style="font-weight: bold;">{{ count }}</span>
<span class="glyphicon {{ icon }}"></span>
<span class="test-result">{{ label }}</span>
</a>
</div>
{% endfor %}
</div>
<div class="visible-print printed-test-result">
{% if fixture.reason %}
<div class="alert alert-warning"><strong>Warning:</strong> {{ fixture.reason }}</div>
{% endif %}
{% for case in fixture.cases %}
<div class="panel {{ panel_class(case.kind) }}">
<div class="panel-heading">
<h4 class="panel-title">
{{ case.display_name }}
</h4>
</div>
<div class="panel-body">
<div><strong>Result:</strong> {{ case.result }}</div>
{% if case.has_failure %}
<div><strong>Message:</strong> {{ case.message|e }}</div>
<div><strong>Stack Trace:</strong> <pre>{{ case.stack_trace|e if case.stack_trace is not none else 'N/A' }}</pre></div>
{% endif %}
</div>
</div>
{% endfor %}
</div>
<div class="modal fade" id="{{ modal_id }}" tabindex="-1" role="dialog" aria-labelledby="{{ modal_id }}-label" aria-hidden="true">
<div class="modal-dialog">
<div class="modal-content">
<div class="modal-header">
<button type="button" class="close" data-dismiss="modal" aria-hidden="true">&times;</button>
<h4 class="modal-title" id="{{ modal_id }}-label">{{ fixture.name }}</h4>
</div>
<div class="modal-body">
<div class="panel-group no-bottom-margin" id="{{ modal_id }}-accordion">
{% if fixture.reason %}
<div class="alert alert-warning"><strong>Warning:</strong> {{ fixture.reason }}</div>
{% endif %}
{% for case in fixture.cases %}
{% set item_id = modal_id ~ '-accordion-' ~ loop.index0 %}
<div class="panel {{ panel_class(case.kind, True) }}">
<div class="panel-heading">
<h4 class="panel-title">
<a data-toggle="collapse" data-parent="#{{ modal_id }}" href="#{{ item_id }}">{{ case.display_name }}<small class="pull-right">{{ case.duration_text }}</small></a>
</h4>
</div>
<div id="{{ item_id }}" class="panel-collapse collapse">
<div class="panel-body">
<div><strong>Result:</strong> {{ case.result }}</div>
{% if case.has_failure %}
<div><strong>Message:</strong> <pre>{{ case.message|e }}</pre></div>
<div><strong>Stack Trace:</strong> <pre>{{ case.stack_trace|e if case.stack_trace is not none else 'N/A' }}</pre></div>
{% endif %}
</div>
</div>
</div>
{% endfor %}
</div>
</div>
<div class="modal-footer">
<button type="button" class="btn btn-primary" data-dismiss="modal">Close</button>
</div>
</div>
</div>
</div>
</div>
</div>
</div>
"""

TEMPLATES = {
    "page.html": PAGE_TEMPLATE,
    "summary.html": SUMMARY_TEMPLATE,
    "fixture.html": FIXTURE_TEMPLATE,
}
