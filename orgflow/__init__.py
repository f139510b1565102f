"""
orgflow: organization lifecycle workflows
"""
