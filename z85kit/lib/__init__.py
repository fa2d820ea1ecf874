"""
The library modules used by the units in `z85kit.units`. The codec itself lives in
`z85kit.lib.chunk` and `z85kit.lib.z85` and can be used without the unit framework.
"""
