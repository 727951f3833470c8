"""服务层：VCS 适配器与拉取服务"""
