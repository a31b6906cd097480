import graphviz as gv

from . import utils

__all__ = [
    'dataflow',
    'render',
]

def _label(partial, step=None):
    label = str(partial)
    if partial.var is not None:
        label = '{} = {}'.format(partial.var, label)
    if step is not None:
        label = '{}\n-> {}'.format(label, utils.pretty_value(step.actual))
    return label

def dataflow(partials, divergence=None, name='counterexample'):
    '''A graphviz.Digraph of 'partials'

    One node per step, solid edges from the step producing a handle to the
    steps using it, dashed edges for program order. The divergent step is red.
    '''
    g = gv.Digraph(name=name, comment='Command sequence dataflow', format='svg')
    g.attr('node', shape='box', fontname='monospace')

    trace = divergence.trace if divergence is not None else []
    producers = {}

    for i, p in enumerate(partials):
        node_id = 'step{}'.format(i)
        step = trace[i] if i < len(trace) else None
        attrs = {}
        if divergence is not None and i == divergence.index:
            attrs = {'color': 'red', 'penwidth': '2'}

        g.node(node_id, label=_label(p, step), **attrs)

        for v in sorted(p.references):
            if v in producers:
                g.edge(producers[v], node_id, label=v.name)

        if p.var is not None:
            producers[p.var] = node_id

        if i > 0:
            g.edge('step{}'.format(i - 1), node_id, style='dashed', color='gray')

    return g

def render(partials, divergence, filename):
    '''Write the dataflow graph to 'filename' (and its rendering next to it)
    '''
    return dataflow(partials, divergence).render(filename)
