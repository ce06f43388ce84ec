from covgraph.render.json import format_json, to_dict
from covgraph.render.summary import render_summary

__all__ = ["format_json", "render_summary", "to_dict"]
