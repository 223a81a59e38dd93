"""业务服务：把校验、解析、组装与存储串成完整的写入流程。"""
