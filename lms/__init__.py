"""学习管理后端：学生、讲师、课程与成绩。"""
