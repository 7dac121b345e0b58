"""
Extension instances, bound to an application in create_app
"""
from flask_assets import Environment

from assetcombine.combine import AssetCombine

assets = Environment()
combine = AssetCombine()
