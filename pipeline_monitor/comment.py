import re
import string
from dataclasses import dataclass

from pipeline_monitor.errors import RenderError


TAG_PREFIX = 'PIPELINE_MONITOR_GENERATED_LOG_COMMENT'

TEMPLATE = string.Template('''\
$marker

## First $limit lines of $project latest build log
<details>
  <summary>Click to expand the latest build log!</summary>

  ## Link to [original cloudwatch log]($deep_link)

$fence
$body
$fence
</details>
''')


@dataclass(frozen=True)
class LogComment:
    tag: str
    body: str
    deep_link: str
    line_limit: int

    @property
    def marker(self):
        return marker_for(self.tag)

    def matches(self, body):
        """True if `body` is a previously generated comment for the same project.

        Only the leading marker counts, a log excerpt may print other markers.
        """
        return (body or '').startswith(self.marker)


def tag_for(project_name):
    if not project_name:
        raise RenderError('cannot tag a log comment without a project name')

    return TAG_PREFIX + '_' + re.sub(r'[^A-Z0-9_-]', '_', project_name.upper())


def marker_for(tag):
    return f'<!-- {tag} -->'


def fence_for(text):
    longest = max((len(run) for run in re.findall(r'`+', text)), default=0)

    return '`' * max(3, longest + 1)


def render(project_name, lines, deep_link, line_limit):
    tag = tag_for(project_name)
    excerpt = '\n'.join(line.rstrip('\r\n') for line in lines)

    try:
        body = TEMPLATE.substitute(
            marker=marker_for(tag),
            limit=line_limit,
            project=project_name,
            deep_link=deep_link,
            fence=fence_for(excerpt),
            body=excerpt)
    except (KeyError, ValueError, TypeError) as e:
        raise RenderError(f'error formatting log comment for {project_name}: {e}') from e

    return LogComment(tag=tag, body=body, deep_link=deep_link, line_limit=line_limit)
