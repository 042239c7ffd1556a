import os

IPSET_EXECUTABLE = os.environ.get('IPSET_EXECUTABLE', 'ipset')

DEBUG = os.environ.get('DEBUG') in ['1', 'true', 'on']
