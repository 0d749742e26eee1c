"""
Mirror — Copy every ref of a source repository onto a GitHub repository.

Clones the source with ``--mirror`` into a temporary directory, checks the
requested branch exists, then force-pushes the whole mirror to the target.
"""
