"""核心层：配置、异常、协议与依赖解析"""
